"""Split iCalendar files so that every calendar holds a single element."""

from __future__ import annotations

import os
import sys
import tempfile
from argparse import ArgumentParser

import vobjtool as vo
from vobjtool.base import DEFAULT_COLUMNS, Component, write
from vobjtool.helper import ENCODING, ERRORS, logger, lowercase, open_input, set_verbose

NAME = "icalsplit"

PREFIXES = {"vcard": "card", "vevent": "evnt", "vtodo": "todo", "vjournal": "jrnl", "vfreebusy": "busy"}


def find_prefix(component):
    """
    Return a short file suffix describing component, or None if unknown.

    A VCALENDAR is named after its elements, or "cal" when they are mixed.
    """
    name = lowercase(component.name)
    if name in PREFIXES:
        return PREFIXES[name]
    if name != "vcalendar":
        return None
    saved = None
    for child in component.children:
        prefix = find_prefix(child)
        if saved and prefix and saved != prefix:
            return "cal"
        saved = prefix or saved
    return saved or "cal"


def find_timezone(root, tzid):
    for timezone in root.components("VTIMEZONE"):
        if (timezone.get_child_value("TZID") or "") == tzid:
            return timezone
    return None


def copy_timezones(component, root, orig_root):
    """
    Copy the VTIMEZONEs that component refers to from orig_root into root.

    Every TZID metadata in component and its descendants is looked up; a
    timezone already present in root is not copied twice.
    """
    for obj in component.walk():
        for line in obj.properties:
            tzid = line.get_param("TZID")
            if tzid is None or find_timezone(root, tzid) is not None:
                continue
            timezone = find_timezone(orig_root, tzid)
            if timezone is None:
                logger.warning(f"Timezone '{tzid}' not found")
                continue
            timezone.duplicate(timezone).attach(root)


def extract(root, child):
    """
    Return a new standalone copy of root holding only child and its timezones.
    """
    new_root = Component.duplicate_root(root)
    new_child = child.duplicate(child)
    copy_timezones(new_child, new_root, root)
    new_child.attach(new_root)
    return new_root


def split(component):
    """
    Yield one document per element of a VCALENDAR, or component itself otherwise.
    """
    if not component.is_named("VCALENDAR"):
        yield component
        return
    for child in component.children:
        if child.is_named("VTIMEZONE"):
            continue
        yield extract(component, child)


class SplitWriter:
    """
    Write documents to unique files in directory, or all of them to output.
    """

    def __init__(self, output=None, directory=".", columns=DEFAULT_COLUMNS, utf8_safe=False):
        self.output = output
        self.directory = directory
        self.columns = columns
        self.utf8_safe = utf8_safe
        self.paths = []

    def write(self, component):
        if self.output is not None:
            write(component, self.output, self.columns, self.utf8_safe)
            return None
        fd, path = tempfile.mkstemp(suffix=f".{find_prefix(component) or 'ics'}", prefix="", dir=self.directory)
        with os.fdopen(fd, "w", encoding=ENCODING, errors=ERRORS) as fp:
            write(component, fp, self.columns, self.utf8_safe)
        logger.debug(f"wrote {component.name} to {path}")
        self.paths.append(path)
        return path


def split_stream(stream, writer):
    """
    Split every document of stream, return the number of documents written.
    """
    count = 0
    for root in vo.read_components(stream):
        for document in split(root):
            writer.write(document)
            count += 1
    return count


def parse_write_options(options, columns=DEFAULT_COLUMNS, utf8_safe=False):
    """
    Parse comma separated KEY[=VALUE] pairs: [no]break, [no]utf8, columns=NUM.
    """
    for option in (o.strip() for o in options.split(",")):
        if not option:
            continue
        key, _, value = option.partition("=")
        negate = key.startswith("no")
        if negate:
            key = key[2:]
        if key == "break":
            columns = 0 if negate else columns or DEFAULT_COLUMNS
        elif key == "utf8":
            utf8_safe = not negate
        elif key == "columns" and value.isdigit():
            columns = int(value)
            if columns == 1:
                raise ValueError("columns must be 0 or at least 2")
        else:
            raise ValueError(f"unknown option '{option}'")
    return {"columns": columns, "utf8_safe": utf8_safe}


def add_common_arguments(parser):
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {vo.VERSION}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Verbose output")
    parser.add_argument(
        "-o",
        "--options",
        action="append",
        default=[],
        help="Add extra KEY[=VALUE] pairs: [no]break (fold lines on 80 columns), columns=NUM, [no]utf8",
    )


def get_write_options(parser, args):
    options = {"columns": DEFAULT_COLUMNS, "utf8_safe": False}
    try:
        for text in args.options:
            options = parse_write_options(text, **options)
    except ValueError as e:
        parser.error(str(e))
    return options


def get_arguments():
    parser = ArgumentParser(prog=NAME, description="split ical/vcard into files with 1 single element")
    add_common_arguments(parser)
    parser.add_argument("files", nargs="*", metavar="FILE", help="Files to use, '-' for stdin (default)")
    args = parser.parse_args()
    return args, get_write_options(parser, args)


def main():
    args, options = get_arguments()
    set_verbose(args.verbose)
    writer = SplitWriter(**options)
    try:
        for filename in args.files or ["-"]:
            logger.debug(f"## {filename}")
            with open_input(filename) as fp:
                split_stream(fp, writer)
    except OSError as e:
        sys.exit(f"{NAME}: {e.filename or ''}: {e.strerror}")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("Aborted")
