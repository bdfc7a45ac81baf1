"""Search vCards and print matching properties, e.g. as a Mutt query command."""

from __future__ import annotations

import os
import sys
from argparse import ArgumentParser

import vobjtool as vo
from vobjtool.helper import ENCODING, ERRORS, escape_undecodable, logger, lowercase, open_input, set_verbose

NAME = "vcardquery"

CONFIG_FILES = ("/etc/vcardquery.conf", "~/.vcardquery")
NO_NAME = "<no name>"


def parse_config(filename, verbose=0):
    """
    Return the input files named by 'file PATH' lines of a config file.

    A missing config file is not an error.
    """
    files = []
    try:
        fp = open(os.path.expanduser(filename), "r", encoding=ENCODING, errors=ERRORS)  # pylint:disable=r1732
    except OSError as e:
        if verbose:
            logger.error(f"fopen {filename}: {e.strerror}")
        return files

    with fp:
        for line_number, line in enumerate(fp, 1):
            if line.startswith("#"):
                continue
            tokens = line.split()
            if not tokens:
                continue
            if tokens[0] == "file" and len(tokens) > 1:
                files.append(tokens[1])
            elif verbose:
                logger.warning(f"unknown config option '{tokens[0]}' in {filename}:{line_number}")
    return files


def searchable_telnr(value):
    """
    Keep only the digits of a telephone number, and a leading '+'.
    """
    prefix = "+" if value.startswith("+") else ""
    return prefix + "".join(char for char in value if char in "0123456789")


def meta_str(line):
    """
    Return a compact, lowercase representation of the metadata of line, or None.
    """
    parts = []
    for param in line.params:
        if lowercase(param.name).startswith("x-"):
            continue
        if line.is_named("EMAIL") and param.is_named("TYPE") and lowercase(param.value) == "internet":
            continue
        parts.append(lowercase(param.name if param.value is None else param.value))
    return ",".join(parts) or None


def find_matches(card, needle, lookfor):
    """
    Return the lookfor properties of card that match needle.

    A needle found in the FN or N property selects all of them.
    """
    needle = lowercase(needle)
    name_match, matches, count = False, [], 0
    for line in card.properties:
        value = line.value or ""
        if line.is_named("FN") or line.is_named("N"):
            name_match = name_match or needle in lowercase(value)
        elif line.is_named(lookfor):
            count += 1
            if line.is_named("TEL"):
                value = searchable_telnr(value)
            if needle in lowercase(value):
                matches.append(line)
    if not count:
        return []
    return list(card.get_properties(lookfor)) if name_match else matches


def address_lines(fields):
    # ADR: pobox;extended;street;city;region;code;country
    pobox, extended, street, city, region, code, country = (fields + [""] * 7)[:7]
    yield from (field for field in (pobox, extended, street) if field)
    if city or code:
        yield f"{code} {city}".strip()
    yield from (field for field in (region, country) if field)


def format_results(card, lines, swap=False):
    name = card.get_child_value("FN") or NO_NAME
    for line in lines:
        fields = [line.value or "", name] if swap else [name, line.value or ""]
        meta = meta_str(line)
        if meta:
            fields.append(meta)
        yield "\t".join(fields)


def format_indented(card, lines):
    yield card.get_child_value("FN") or NO_NAME
    for line in lines:
        meta = meta_str(line)
        if meta:
            yield f"\t[{meta}]"
        fields = (line.value or "").split(";")
        if line.is_named("ADR"):
            fields = list(address_lines(fields))
        yield from (f"\t{field}" for field in fields)


def vcard_filter(stream, needle, lookfor="EMAIL", swap=False, indented=False):
    """
    Yield the output lines for every matching VCARD of stream.
    """
    for card in vo.read_components(stream):
        if not card.is_named("VCARD"):
            logger.debug(f"skipping {card.name}")
            continue
        lines = find_matches(card, needle, lookfor)
        if not lines:
            continue
        if indented:
            yield from format_indented(card, lines)
        else:
            yield from format_results(card, lines, swap)


def get_arguments():
    parser = ArgumentParser(prog=NAME, description="filter VCard properties")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {vo.VERSION}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Verbose output")
    parser.add_argument("-p", "--prop", default="EMAIL", help="Which property to retrieve (default: EMAIL)")
    parser.add_argument("-s", "--swap", action="store_true", help="Output property, then name, then metadata")
    parser.add_argument(
        "-M", "--mutt", action="store_true", help="Output for Mutt (prop=EMAIL, swap + header line)"
    )
    parser.add_argument("-i", "--indent", action="store_true", help="Output with indents")
    parser.add_argument("needle", metavar="NEEDLE", help="The text to look for in NAME or <PROP>")
    parser.add_argument("files", nargs="*", metavar="FILE", help="Files to use, '-' for stdin")
    return parser.parse_args()


def main():
    args = get_arguments()
    set_verbose(args.verbose)
    escape_undecodable(sys.stdout)
    if args.mutt:
        args.swap, args.prop = True, "EMAIL"
        # Mutt ignores the first line
        print(f"{NAME} {vo.VERSION}")

    files = args.files
    if not files:
        files = [path for config in CONFIG_FILES for path in parse_config(config, args.verbose)]
    try:
        for filename in files or ["-"]:
            logger.debug(f"## {filename}")
            with open_input(filename) as fp:
                for line in vcard_filter(fp, args.needle, args.prop, args.swap, args.indent):
                    print(line)
    except OSError as e:
        sys.exit(f"{NAME}: {e.filename or ''}: {e.strerror}")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("Aborted")
