"""Schema-to-type compiler for JSON Schema and OpenAPI v3 documents."""

from .builder import (
    BuildContext,
    SchemaShape,
    build_declaration,
    build_types,
    classify_schema,
)
from .openapi import CompileOptions, compile_openapi
from .printer import PrinterContext, render_declaration, render_type, to_source
from .resolver import ReferenceResolver, compile_schema, resolve_reference
from .tree import assemble

__all__ = [
    "BuildContext",
    "CompileOptions",
    "PrinterContext",
    "ReferenceResolver",
    "SchemaShape",
    "assemble",
    "build_declaration",
    "build_types",
    "classify_schema",
    "compile_openapi",
    "compile_schema",
    "render_declaration",
    "render_type",
    "resolve_reference",
    "to_source",
]
