"""Read, split or summarise vCard and vCalendar files."""

from __future__ import annotations

import sys
from argparse import ArgumentParser

from dateutil import parser as date_parser
from dateutil import tz

import vobjtool as vo
from vobjtool.base import write
from vobjtool.helper import logger, lowercase, open_input, open_output, set_verbose
from vobjtool.icalsplit import SplitWriter, add_common_arguments, get_write_options, split_stream

NAME = "votool"

ACTIONS = ("cat", "split", "subject")
SUBJECT_TYPES = ("VEVENT", "VTODO", "VJOURNAL")


def format_start(line):
    """
    Return a DTSTART line as a readable date, honouring its TZID.
    """
    if line is None or not line.value:
        return "?"
    try:
        start = date_parser.parse(line.value)
    except (ValueError, OverflowError):
        logger.debug(f"unparsable date {line.value!r}")
        return line.value
    if lowercase(line.get_param("VALUE")) == "date" or len(line.value.strip()) == 8:
        return start.strftime("%Y-%m-%d")

    tzid = line.get_param("TZID")
    if tzid and start.tzinfo is None:
        zone = tz.gettz(tzid)
        if zone is None:
            logger.debug(f"unknown timezone {tzid!r}")
        else:
            start = start.replace(tzinfo=zone)
    return start.strftime("%Y-%m-%d %H:%M %Z").rstrip()


def subjects(component):
    """
    Yield one line per event, todo or journal entry: start date and summary.
    """
    for obj in component.walk():
        if any(obj.is_named(name) for name in SUBJECT_TYPES):
            yield f"{format_start(obj.get_property('DTSTART'))}\t{obj.get_child_value('SUMMARY', '')}"


def cat(stream, output, columns, utf8_safe):
    """
    Copy every document of stream to output, refolding its lines.
    """
    nlines = 0
    for component in vo.read_components(stream):
        nlines += write(component, output, columns, utf8_safe)
    return nlines


def get_arguments():
    parser = ArgumentParser(prog=NAME, description="read, split or summarise ical/vcard files")
    add_common_arguments(parser)
    parser.add_argument(
        "-a",
        "--action",
        required=True,
        choices=ACTIONS,
        help="cat: read & write to stdout, split: 1 element per VCALENDAR, subject: 1 line per element",
    )
    parser.add_argument("-O", "--output", help="Output all vobjects to OUTPUT")
    parser.add_argument("files", nargs="+", metavar="FILE", help="Files to use, '-' for stdin")
    args = parser.parse_args()
    return args, get_write_options(parser, args)


def run(args, options):
    with open_output(args.output) as output:
        if args.action == "split" and args.output is None:
            writer = SplitWriter(**options)
        else:
            writer = SplitWriter(output=output, **options)
        for filename in args.files:
            logger.debug(f"## {filename}")
            with open_input(filename) as fp:
                if args.action == "cat":
                    cat(fp, output, **options)
                elif args.action == "split":
                    split_stream(fp, writer)
                else:
                    for component in vo.read_components(fp):
                        for line in subjects(component):
                            print(line, file=output)


def main():
    args, options = get_arguments()
    set_verbose(args.verbose)
    try:
        run(args, options)
    except OSError as e:
        sys.exit(f"{NAME}: {e.filename or ''}: {e.strerror}")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("Aborted")
