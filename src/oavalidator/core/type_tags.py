"""
Type tag vocabulary.

A type tag is the string encoding of a semantic type:

- scalar tags are schema.org (or OpenActive) IRIs such as ``https://schema.org/Text``;
- ``#Name`` refers to a named model;
- ``ArrayOf#<inner>`` is an array whose inner tag is a scalar, a named model
  (``ArrayOf#Place``) or a brace union (``ArrayOf#{A,B}``);
- ``null``, ``undefined``, ``unknown`` and ``Array`` are produced by inference
  only and never appear in declarations.
"""

from __future__ import annotations

from typing import Optional

SCHEMA_NS = "https://schema.org/"
OA_NS = "https://openactive.io/"

BOOLEAN = f"{SCHEMA_NS}Boolean"
INTEGER = f"{SCHEMA_NS}Integer"
FLOAT = f"{SCHEMA_NS}Float"
TEXT = f"{SCHEMA_NS}Text"
DATE = f"{SCHEMA_NS}Date"
DATETIME = f"{SCHEMA_NS}DateTime"
TIME = f"{SCHEMA_NS}Time"
DURATION = f"{SCHEMA_NS}Duration"
URL = f"{SCHEMA_NS}URL"
URL_TEMPLATE = f"{OA_NS}UrlTemplate"

SCALAR_TAGS = frozenset(
    {BOOLEAN, INTEGER, FLOAT, TEXT, DATE, DATETIME, TIME, DURATION, URL, URL_TEMPLATE}
)

NULL = "null"
UNDEFINED_TAG = "undefined"
UNKNOWN = "unknown"
EMPTY_ARRAY = "Array"
THING = "#Thing"

SENTINEL_TAGS = frozenset({NULL, UNDEFINED_TAG, UNKNOWN, EMPTY_ARRAY})

ARRAY_PREFIX = "ArrayOf"
MODEL_PREFIX = "#"

# specific -> general; one directional.
COERCIONS: dict[str, str] = {
    DATE: TEXT,
    DATETIME: TEXT,
    DURATION: TEXT,
    TIME: TEXT,
    URL: TEXT,
    URL_TEMPLATE: TEXT,
    INTEGER: FLOAT,
}


def is_array_tag(tag: str) -> bool:
    return tag.startswith(f"{ARRAY_PREFIX}#")


def array_of(inner: str) -> str:
    """``ArrayOf#<inner>``; a named model loses its own ``#``."""
    return f"{ARRAY_PREFIX}#{strip_model(inner)}"


def array_inner(tag: str) -> str:
    """Inner tag of an array tag: a scalar IRI, a bare model label or a brace union."""
    return tag[len(ARRAY_PREFIX) + 1:]


def is_model_tag(tag: str) -> bool:
    return tag.startswith(MODEL_PREFIX)


def strip_model(tag: str) -> str:
    return tag[1:] if tag.startswith(MODEL_PREFIX) else tag


def is_union_tag(tag: str) -> bool:
    return tag.startswith("{") and tag.endswith("}")


def union_members(tag: str) -> list[str]:
    return [member.strip() for member in tag[1:-1].split(",") if member.strip()]


def union_of(tags: list[str]) -> str:
    return "{" + ",".join(strip_model(tag) for tag in tags) + "}"


def is_label_tag(tag: str) -> bool:
    """A bare model label such as ``Schedule``: no IRI, sentinel, union, array or ``#`` prefix."""
    return (
        bool(tag)
        and "://" not in tag
        and tag not in SENTINEL_TAGS
        and not is_union_tag(tag)
        and not is_array_tag(tag)
        and not is_model_tag(tag)
    )


def short_name(tag: str) -> Optional[str]:
    """Final path segment of a scalar IRI (``Text`` for ``https://schema.org/Text``)."""
    if "://" not in tag:
        return None
    return tag.rstrip("/#").rsplit("/", 1)[-1].rsplit("#", 1)[-1]


def display_name(tag: str) -> str:
    """Readable form of a tag for diagnostics."""
    if is_array_tag(tag):
        return f"Array of {display_name(array_inner(tag))}"
    if is_union_tag(tag):
        return " or ".join(display_name(member) for member in union_members(tag))
    if is_model_tag(tag):
        return strip_model(tag)
    return short_name(tag) or tag
