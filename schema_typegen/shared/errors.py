"""Custom exceptions for the type generator."""

from __future__ import annotations

import json
from typing import Any

_EXCERPT_LIMIT = 120


def _excerpt(value: Any) -> str:
    """Render a schema fragment compactly for error messages."""
    try:
        text = json.dumps(value, sort_keys=True, default=repr)
    except (TypeError, ValueError):
        text = repr(value)
    if len(text) > _EXCERPT_LIMIT:
        return text[: _EXCERPT_LIMIT - 3] + "..."
    return text


class SchemaError(Exception):
    """Base exception for schema-related errors."""

    def __init__(self, message: str, schema_path: str | None = None) -> None:
        self.schema_path = schema_path
        full_message = f"{message}" if not schema_path else f"[{schema_path}] {message}"
        super().__init__(full_message)


class SchemaValidationError(SchemaError):
    """Raised when a document is structurally unusable."""

    def __init__(
        self,
        message: str,
        schema_path: str | None = None,
        field: str | None = None,
    ) -> None:
        self.field = field
        if field:
            message = f"Field '{field}': {message}"
        super().__init__(message, schema_path)


class UnsupportedSchemaError(SchemaError):
    """Raised when a schema node matches none of the recognized shapes."""

    def __init__(
        self,
        schema: Any,
        schema_path: str | None = None,
        reason: str | None = None,
    ) -> None:
        self.schema = schema
        message = f"Unsupported schema {_excerpt(schema)}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, schema_path)


class UnsupportedTypeError(SchemaError):
    """Raised for an unrecognized primitive type tag."""

    def __init__(self, type_name: Any, schema_path: str | None = None) -> None:
        self.type_name = type_name
        super().__init__(f"Unsupported type '{type_name}'", schema_path)


class UnsupportedEnumError(SchemaError):
    """Raised when an enum holds a value that is not a primitive literal."""

    def __init__(self, values: Any, schema_path: str | None = None) -> None:
        self.values = values
        super().__init__(f"Unsupported enum {_excerpt(values)}", schema_path)


class ReferenceNotFoundError(SchemaError):
    """Raised when a $ref points at nothing in the document."""

    def __init__(self, ref: str, schema_path: str | None = None) -> None:
        self.ref = ref
        super().__init__(f"Reference '{ref}' does not resolve", schema_path)
