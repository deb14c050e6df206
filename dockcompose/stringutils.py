"""Small string helpers."""

from __future__ import annotations

from collections.abc import Iterable

_TRUE_VALUES = frozenset({"1", "t", "true"})


def string_contains(array: Iterable[str], needle: str) -> bool:
    """Return True when ``needle`` is one of the items of ``array``."""
    return needle in array


def string_to_bool(s: str) -> bool:
    """Convert a string to a boolean, treating anything unrecognised as False."""
    return s.strip().lower() in _TRUE_VALUES