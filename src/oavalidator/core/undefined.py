"""Marker for "no value at all", distinct from an explicit JSON ``null``."""

from __future__ import annotations

from enum import Enum


class Undefined(Enum):
    UNDEFINED = "undefined"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = Undefined.UNDEFINED


def is_missing(value: object) -> bool:
    """True for an absent value or an explicit ``null``."""
    return value is UNDEFINED or value is None
