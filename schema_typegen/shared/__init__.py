"""Shared utilities for the type generator."""

from .schema_loader import load_schema
from .naming import (
    build_identifier,
    join_ref,
    slugify,
    split_ref,
    to_camel_case,
)
from .errors import (
    ReferenceNotFoundError,
    SchemaError,
    SchemaValidationError,
    UnsupportedEnumError,
    UnsupportedSchemaError,
    UnsupportedTypeError,
)

__all__ = [
    # Schema loading
    "load_schema",
    # Naming utilities
    "build_identifier",
    "join_ref",
    "slugify",
    "split_ref",
    "to_camel_case",
    # Errors
    "ReferenceNotFoundError",
    "SchemaError",
    "SchemaValidationError",
    "UnsupportedEnumError",
    "UnsupportedSchemaError",
    "UnsupportedTypeError",
]
