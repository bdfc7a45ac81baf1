from __future__ import annotations

import contextlib
import os
import sys
from typing import Generator

ENCODING = "utf-8"
# undecodable input bytes travel as lone surrogates and are written back unchanged
ERRORS = "surrogateescape"


def indent_str(prefix: str = " ", *, level: int = 0, tabwidth: int = 3) -> str:
    return prefix * level * tabwidth


def is_utf8_continuation(byte: int) -> bool:
    return (byte & 0xC0) == 0x80


def rejoin_utf8(text: str) -> str:
    """
    Merge escaped bytes of text back into characters where they form utf-8.

    Folding without utf8_safe may cut a multi-byte sequence over two lines,
    unfolding puts the halves next to each other again.
    """
    try:
        return text.encode(ENCODING, ERRORS).decode(ENCODING, ERRORS)
    except UnicodeEncodeError:
        return text


def split_by_size(text: str, size: int, utf8_safe=False) -> Generator:
    """
    Cut text into segments for line folding.

    The first segment holds up to size utf-8 bytes, the following ones
    size - 1, leaving room for the leading space of a continuation line.
    With utf8_safe a cut never lands inside a multi-byte sequence, otherwise
    the halves of a cut sequence come out as escaped bytes.
    """
    if size < 2:
        raise ValueError(f"Cannot fold lines at {size} columns")

    data = text.encode(ENCODING, ERRORS)
    total_size = len(data)
    start = 0
    while total_size - start > size:
        k = start + size
        if utf8_safe:
            while k > start and is_utf8_continuation(data[k]):
                k -= 1
            if k == start:
                # a single sequence wider than the segment, keep it whole
                k = start + size
                while k < total_size and is_utf8_continuation(data[k]):
                    k += 1
        yield data[start:k].decode(ENCODING, ERRORS)
        if start == 0:
            size -= 1
        start = k
    if start < total_size or not total_size:
        yield data[start:].decode(ENCODING, ERRORS)


def escape_undecodable(stream):
    """
    Let a standard stream pass bytes that are not utf-8.
    """
    reconfigure = getattr(stream, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(errors=ERRORS)
    return stream


@contextlib.contextmanager
def open_input(filename: str):
    """
    Open filename for reading, '-' is stdin and a leading '~' is the home directory.
    """
    if filename == "-":
        yield escape_undecodable(sys.stdin)
        return
    with open(os.path.expanduser(filename), "r", encoding=ENCODING, errors=ERRORS) as fp:
        yield fp


@contextlib.contextmanager
def open_output(filename: str | None):
    """
    Open filename for writing, None or '-' is stdout.
    """
    if filename in (None, "-"):
        yield escape_undecodable(sys.stdout)
        return
    with open(os.path.expanduser(filename), "w", encoding=ENCODING, errors=ERRORS) as fp:
        yield fp
