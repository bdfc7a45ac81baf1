"""General tests for parsing vobject streams."""

import logging

import pytest

from vobjtool import read_components, read_one
from vobjtool.base import ComponentReader, find_delimiter, parse_line, parse_params, text_line_to_content_line
from vobjtool.exceptions import ContinuationError, ParseError, UnbalancedEndError, UnexpectedEOFError

from .common import TEST_FILE_DIR, VCARD, get_test_file


def test_find_delimiter():
    assert find_delimiter("FN:John", ":") == 2
    assert find_delimiter("a;b;c", ";") == 1
    assert find_delimiter("abc", ":") is None
    assert find_delimiter('X;A="a:b":c', ":") == 9
    assert find_delimiter("X;A='a:b':c", ":") == 9
    # the other quote character does not close an escape
    assert find_delimiter("X;A='a\":b':c", ":") == 10
    assert find_delimiter('X;A="a:b', ":") is None
    assert find_delimiter("a;b;c", ";", 2) == 3


def test_find_delimiter_never_inside_quotes():
    text = 'A;B="x;y";C=\'p;q\';D'
    pos = find_delimiter(text, ";")
    found = []
    while pos is not None:
        found.append(pos)
        pos = find_delimiter(text, ";", pos + 1)
    assert found == [1, 9, 17]


def test_parse_line():
    assert parse_line("BLAH:") == ("BLAH", [], "")
    assert parse_line("BLAH") == ("BLAH", [], None)
    assert parse_line("RDATE:VALUE=DATE:19970304,19970504") == ("RDATE", [], "VALUE=DATE:19970304,19970504")
    assert parse_line('DESCRIPTION;ALTREP="http://www.wiz.org":The Fall 98 Wild Wizards Conference') == (
        "DESCRIPTION",
        [("ALTREP", "http://www.wiz.org")],
        "The Fall 98 Wild Wizards Conference",
    )
    assert parse_line("EMAIL;PREF;INTERNET:john@nowhere.com") == (
        "EMAIL",
        [("PREF", None), ("INTERNET", None)],
        "john@nowhere.com",
    )
    assert parse_line("ADR;type=HOME;type=pref:;;Reeperbahn 116;Hamburg;;20359;") == (
        "ADR",
        [("type", "HOME"), ("type", "pref")],
        ";;Reeperbahn 116;Hamburg;;20359;",
    )
    with pytest.raises(ParseError):
        parse_line(":")
    with pytest.raises(ParseError):
        parse_line(";TYPE=WORK:john@example.com")


def test_parse_params():
    assert parse_params('ALTREP="http://www.wiz.org"') == [("ALTREP", "http://www.wiz.org")]
    assert parse_params('ALTREP="http://www.wiz.org;;";NEXT=Nope;BAR') == [
        ("ALTREP", "http://www.wiz.org;;"),
        ("NEXT", "Nope"),
        ("BAR", None),
    ]
    assert parse_params("A=;B='x'") == [("A", ""), ("B", "x")]
    # only a matching pair of quotes is stripped
    assert parse_params("A=\"x'") == [("A", "\"x'")]
    with pytest.raises(ParseError):
        parse_params("=value")


def test_text_line_to_content_line():
    line = text_line_to_content_line("Email;Type=WORK;PREF:john@example.com", 7)
    assert line.name == "Email"
    assert line.value == "john@example.com"
    assert line.line_number == 7
    assert line.params.names() == ["Type", "PREF"]
    assert line.get_param("TYPE") == "WORK"
    assert line.get_param("pref") == ""
    assert line.get_param("CHARSET") is None


def test_scenario_vcard():
    card = read_one(VCARD)
    assert card.name == "VCARD"
    assert len(card.properties) == 2
    assert card.children == []
    assert card.get_child_value("fn") == "John Doe"
    assert card.properties[1].get_param("TYPE") == "WORK"
    assert card.parent is None


def test_read_from_file_object():
    with open(TEST_FILE_DIR / "simple_vcard.vcf", encoding="utf-8") as fp:
        card = read_one(fp)
    assert card.get_child_value("EMAIL") == "john@example.com"


def test_nesting_balance():
    root = read_one("BEGIN:A\nBEGIN:B\nEND:B\nEND:A\n")
    assert root.name == "A"
    assert root.properties == []
    assert [child.name for child in root.children] == ["B"]
    assert root.children[0].parent is root
    assert root.children[0].children == []


def test_end_is_case_insensitive():
    root = read_one("begin:vCalendar\nBEGIN:VEVENT\nSUMMARY:x\nend:vevent\nEND:VCALENDAR\n")
    assert root.name == "vCalendar"
    assert root.children[0].get_child_value("summary") == "x"


def test_unfolding():
    cal = read_one(get_test_file("folded.ics"))
    event = cal.first_child()
    assert event.get_child_value("DESCRIPTION") == "This description is rather long and was foldedover three lines"
    summary = event.get_property("summary")
    assert summary.value == "Folded"
    assert summary.get_param("LANGUAGE") == "en:US"
    assert summary.get_param("X-NOTE") == "a;b"
    assert summary.x_note_param == "a;b"
    with pytest.raises(AttributeError):
        summary.charset_param  # pylint:disable=w0104


def test_line_numbers():
    cal = read_one(get_test_file("folded.ics"))
    event = cal.first_child()
    assert cal.line_number == 1
    assert event.line_number == 2
    assert [line.line_number for line in event.properties] == [3, 6]


def test_read_components():
    text = VCARD + "\n" + VCARD.replace("John Doe", "Jane Roe")
    cards = list(read_components(text))
    assert [card.get_child_value("FN") for card in cards] == ["John Doe", "Jane Roe"]


def test_reader_keeps_line_count():
    reader = ComponentReader(VCARD + VCARD)
    assert reader.next_component() is not None
    assert reader.line_number == 4
    assert reader.next_component() is not None
    assert reader.line_number == 8
    assert reader.next_component() is None


def test_empty_stream():
    assert read_one("") is None
    assert list(read_components("\n\n")) == []


def test_unexpected_eof(caplog):
    cal = get_test_file("unclosed.ics")
    with caplog.at_level(logging.ERROR):
        assert read_one(cal) is None
    assert "unexpected EOF" in caplog.text

    with pytest.raises(UnexpectedEOFError) as excinfo:
        read_one(cal, strict=True)
    assert excinfo.value.line_number == 4


def test_bad_continuation(caplog):
    text = "BEGIN:VCARD\n continued\nFN:x\nEND:VCARD\n"
    with caplog.at_level(logging.ERROR):
        card = read_one(text)
    assert card.get_child_value("FN") == "x"
    assert len(card.properties) == 1
    assert "At line 2" in caplog.text

    with pytest.raises(ContinuationError):
        read_one(text, strict=True)


def test_line_before_begin_is_skipped(caplog):
    with caplog.at_level(logging.WARNING):
        card = read_one("STRAY:line\n" + VCARD)
    assert len(card.properties) == 2
    assert card.get_property("STRAY") is None
    assert "no component open" in caplog.text


def test_unbalanced_end(caplog):
    text = "BEGIN:A\nBEGIN:B\nX:1\nEND:C\nY:2\nEND:B\nEND:A\n"
    with caplog.at_level(logging.ERROR):
        root = read_one(text)
    child = root.first_child()
    assert [line.name for line in child.properties] == ["X", "Y"]
    assert "B component wasn't closed" in caplog.text

    with pytest.raises(UnbalancedEndError):
        read_one(text, strict=True)


def test_end_without_begin(caplog):
    with caplog.at_level(logging.ERROR):
        card = read_one("END:VCARD\n" + VCARD)
    assert card.get_child_value("FN") == "John Doe"
    assert "never opened" in caplog.text


def test_bad_line_is_skipped(caplog):
    text = "BEGIN:VCARD\n:no name\nFN:x\nEND:VCARD\n"
    with caplog.at_level(logging.ERROR):
        card = read_one(text)
    assert [line.name for line in card.properties] == ["FN"]
    assert "Skipped line: 2" in caplog.text

    with pytest.raises(ParseError):
        read_one(text, strict=True)


def test_property_without_value():
    card = read_one("BEGIN:VCARD\nX-FLAG\nEND:VCARD\n")
    assert card.get_property("x-flag").value is None
    assert card.get_child_value("x-flag", "default") is None
    assert card.get_child_value("missing", "default") == "default"


def test_blank_lines_are_ignored():
    card = read_one("BEGIN:VCARD\n\nFN:x\n\n y\nEND:VCARD\n")
    assert card.get_child_value("FN") == "xy"
