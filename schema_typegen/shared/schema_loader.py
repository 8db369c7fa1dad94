"""Schema document loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .errors import SchemaError

YAML_SUFFIXES = frozenset({".yml", ".yaml"})


def load_schema(schema_path: Path) -> dict[str, Any]:
    """Load a JSON Schema or OpenAPI document from a YAML or JSON file.

    Args:
        schema_path: Path to the document.

    Returns:
        The parsed document.

    Raises:
        SchemaError: If the file cannot be read or parsed.
    """
    try:
        content = schema_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaError(f"Failed to read schema file: {e}", str(schema_path)) from e

    if schema_path.suffix.lower() in YAML_SUFFIXES:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise SchemaError(f"Invalid YAML: {e}", str(schema_path)) from e
    else:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise SchemaError(f"Invalid JSON: {e}", str(schema_path)) from e

    if not isinstance(data, dict):
        raise SchemaError("Schema root must be a mapping", str(schema_path))

    return data
