"""Naming utilities for code generation."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Sequence

_IDENTIFIER_BOUNDARY = re.compile(r"(?:^|[^a-z0-9]+)([a-z])", re.IGNORECASE)


def split_ref(ref: str) -> list[str]:
    """Split a reference string into its path segments.

    The leading anchor (``#`` or ``#/``) is dropped along with empty
    segments, and JSON pointer escapes are decoded.

    Examples:
        >>> split_ref("#/components/schemas/User")
        ['components', 'schemas', 'User']
        >>> split_ref("#")
        []
    """
    if ref.startswith("#"):
        ref = ref[1:]
    return [
        segment.replace("~1", "/").replace("~0", "~")
        for segment in ref.split("/")
        if segment
    ]


def join_ref(parts: Sequence[str]) -> str:
    """Build a local reference string from path segments."""
    escaped = (part.replace("~", "~0").replace("/", "~1") for part in parts)
    return "#/" + "/".join(escaped)


@lru_cache(maxsize=1024)
def build_identifier(part: str) -> str:
    """Turn an arbitrary path segment into a type identifier fragment.

    Every run of non-alphanumeric characters is removed and the letter
    following it is upper-cased, as is the first letter. Cached.

    Examples:
        >>> build_identifier("components")
        'Components'
        >>> build_identifier("__api_request_bodies")
        'ApiRequestBodies'
        >>> build_identifier("$200")
        '$200'
    """
    return _IDENTIFIER_BOUNDARY.sub(lambda match: match.group(1).upper(), part)


@lru_cache(maxsize=512)
def to_camel_case(value: str) -> str:
    """Convert a name in any casing to camelCase. Cached.

    Examples:
        >>> to_camel_case("user_id")
        'userId'
        >>> to_camel_case("X-Request-ID")
        'xRequestId'
    """
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value)
    value = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", value)
    parts = [part for part in re.split(r"[^a-zA-Z0-9]+", value) if part]
    if not parts:
        return ""
    first, *rest = parts
    return first.lower() + "".join(part.capitalize() for part in rest)


@lru_cache(maxsize=512)
def slugify(value: str, *, fallback: str = "operation") -> str:
    """Convert a string to a slug suitable for operation names. Cached."""
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value)
    value = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", value)
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "_", value)
    cleaned = re.sub(r"_+", "_", cleaned)
    cleaned = cleaned.strip("_")
    return cleaned.lower() or fallback
