#!/usr/bin/env python3
"""
Generate TypeScript declarations from a JSON Schema or OpenAPI document.

Usage:
    python -m schema_typegen <document> [options]

Examples:
    python -m schema_typegen schemas/user.json --name User
    python -m schema_typegen openapi.yaml --output src/api.d.ts
    python -m schema_typegen openapi.yaml --filter-status 200 --filter-status 201
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from .shared import SchemaError, load_schema
from .type_codegen import CompileOptions, compile_openapi, compile_schema, to_source
from .type_codegen.ir import NamespaceNode

HEADER = "// Auto-generated by schema_typegen. Do not edit manually."


def is_openapi(document: dict[str, Any]) -> bool:
    """Tell an OpenAPI document from a plain JSON Schema."""
    return "openapi" in document


def generate(
    document: dict[str, Any],
    *,
    openapi: bool | None = None,
    name: str | None = None,
    options: CompileOptions | None = None,
) -> NamespaceNode:
    """Compile a loaded document, detecting its kind unless forced."""
    if openapi is None:
        openapi = is_openapi(document)
    if openapi:
        if name:
            return compile_openapi(document, name, options)
        return compile_openapi(document, options=options)
    return compile_schema(document, name)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generate TypeScript declarations from JSON Schema or OpenAPI documents",
    )
    parser.add_argument("document", type=Path, help="Path to the document (JSON or YAML)")
    parser.add_argument(
        "--name",
        default=None,
        help="Root declaration name (JSON Schema) or base namespace (OpenAPI)",
    )
    kind = parser.add_mutually_exclusive_group()
    kind.add_argument(
        "--openapi",
        dest="openapi",
        action="store_const",
        const=True,
        default=None,
        help="Treat the document as OpenAPI v3",
    )
    kind.add_argument(
        "--jsonschema",
        dest="openapi",
        action="store_const",
        const=False,
        help="Treat the document as a JSON Schema",
    )
    parser.add_argument(
        "--filter-status",
        dest="filter_statuses",
        type=int,
        action="append",
        default=None,
        help="Only include this response status in operation outputs (repeatable)",
    )
    parser.add_argument(
        "--generate-unused-schemas",
        action="store_true",
        help="Declare every components schema, even unreferenced ones",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output file (defaults to stdout)",
    )

    args = parser.parse_args(argv)

    options = CompileOptions(
        filter_statuses=frozenset(args.filter_statuses) if args.filter_statuses else None,
        generate_unused_schemas=args.generate_unused_schemas,
    )

    try:
        document = load_schema(args.document)
        tree = generate(document, openapi=args.openapi, name=args.name, options=options)
        source = to_source(tree, header=HEADER)
        if args.output is None:
            sys.stdout.write(source)
            return
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(source, encoding="utf-8")
    except (SchemaError, OSError) as e:
        raise SystemExit(f"Error: {e}") from e

    count = sum(1 for _ in tree.iter_declarations())
    print(f"Generated {count} declaration(s) from {args.document} -> {args.output}")


if __name__ == "__main__":
    main()
