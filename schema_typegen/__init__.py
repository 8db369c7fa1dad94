"""Generate TypeScript type declarations from JSON Schema and OpenAPI documents."""

from .shared import (
    ReferenceNotFoundError,
    SchemaError,
    UnsupportedEnumError,
    UnsupportedSchemaError,
    UnsupportedTypeError,
)
from .type_codegen import (
    CompileOptions,
    compile_openapi,
    compile_schema,
    resolve_reference,
    to_source,
)

__all__ = [
    "CompileOptions",
    "ReferenceNotFoundError",
    "SchemaError",
    "UnsupportedEnumError",
    "UnsupportedSchemaError",
    "UnsupportedTypeError",
    "compile_openapi",
    "compile_schema",
    "resolve_reference",
    "to_source",
]
