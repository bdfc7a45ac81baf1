from __future__ import annotations

from functools import lru_cache


def lowercase(value: str | None) -> str | None:
    """
    Return a lowercased copy of value, or None.
    """
    return None if value is None else value.lower()


@lru_cache(32)
def to_vname(name, strip_num=0, upper=False) -> str:
    """
    Turn a Python name into a vobject style name,
    optionally uppercase and with characters stripped off.
    """
    if upper:
        name = name.upper()
    if strip_num != 0:
        name = name[:-strip_num]
    return name.replace("_", "-")
