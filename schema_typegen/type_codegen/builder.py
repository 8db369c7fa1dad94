"""
Type Expression Builder - translates one schema node into type expressions.

Building never inlines a referenced schema: a ``$ref`` becomes a qualified
reference and the path is recorded on the ``BuildContext`` so the
resolution engine can declare it later.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Final

from ..shared import (
    UnsupportedEnumError,
    UnsupportedSchemaError,
    UnsupportedTypeError,
    build_identifier,
    join_ref,
    split_ref,
)
from .ir import (
    ANY,
    BOOLEAN,
    NEVER,
    NULL,
    NUMBER,
    STRING,
    ArrayOf,
    Declaration,
    Field,
    IndexSignature,
    Literal,
    NonNull,
    ObjectOf,
    Reference,
    TypeExpression,
    intersection_of,
    union_of,
)

FALLBACK_NAME: Final[str] = "Unknown"

COMBINATORS: Final[tuple[str, ...]] = ("oneOf", "anyOf", "allOf")

PRIMITIVE_TYPES: Final[dict[str, TypeExpression]] = {
    "any": ANY,
    "boolean": BOOLEAN,
    "integer": NUMBER,
    "number": NUMBER,
    "string": STRING,
}


class SchemaShape(Enum):
    """The recognized shapes of a schema node, in dispatch order."""

    BOOLEAN = "boolean"
    REFERENCE = "$ref"
    CONST = "const"
    ENUM = "enum"
    TYPED = "type"
    COMBINATOR = "combinator"


@dataclass
class BuildContext:
    """State threaded through every build call of one compilation.

    ``discovered`` maps the canonical spelling of every reference met so
    far to its path segments, in first-discovery order; ``pending`` holds
    the canonical references not yet handed to the resolver. Two spellings
    with equal segments are the same reference.
    """

    build_identifier: Callable[[str], str] = build_identifier
    root_name: str | None = None
    current_path: str | None = None
    discovered: dict[str, tuple[str, ...]] = field(default_factory=dict)
    pending: deque[str] = field(default_factory=deque)

    def register(self, ref: str) -> tuple[str, ...]:
        """Record a reference and return its path segments."""
        if not isinstance(ref, str) or not ref.startswith("#"):
            raise UnsupportedSchemaError(
                {"$ref": ref}, self.current_path, "external references are not supported"
            )
        parts = tuple(split_ref(ref))
        if not parts:
            if self.root_name is None:
                raise UnsupportedSchemaError(
                    {"$ref": ref}, self.current_path, "no root declaration to refer to"
                )
            return (self.root_name,)
        key = join_ref(parts)
        if key not in self.discovered:
            self.discovered[key] = parts
            self.pending.append(key)
        return parts

    def reference(self, parts: tuple[str, ...] | list[str]) -> Reference:
        """Build the qualified reference for a path."""
        return Reference(tuple(self.build_identifier(part) for part in parts))


def classify_schema(schema: Any, context: BuildContext | None = None) -> SchemaShape:
    """Determine which shape a schema node has.

    Raises:
        UnsupportedSchemaError: If the node matches no recognized shape.
    """
    schema_path = context.current_path if context else None
    if isinstance(schema, bool):
        return SchemaShape.BOOLEAN
    if not isinstance(schema, dict):
        raise UnsupportedSchemaError(schema, schema_path)
    if "$ref" in schema:
        return SchemaShape.REFERENCE
    if "const" in schema:
        return SchemaShape.CONST
    if "enum" in schema:
        return SchemaShape.ENUM
    if "type" in schema:
        return SchemaShape.TYPED
    present = [key for key in COMBINATORS if key in schema]
    if len(present) == 1:
        return SchemaShape.COMBINATOR
    if present:
        raise UnsupportedSchemaError(
            schema, schema_path, f"combines {', '.join(present)}"
        )
    raise UnsupportedSchemaError(schema, schema_path)


def _is_primitive(value: Any) -> bool:
    return value is None or isinstance(value, (bool, int, float, str))


def build_literal(value: Any, context: BuildContext | None = None) -> Literal:
    """Build the literal type for a number, string, boolean or null value."""
    if not _is_primitive(value):
        raise UnsupportedSchemaError(
            {"const": value},
            context.current_path if context else None,
            "literal must be a number, string, boolean or null",
        )
    return Literal(value)


def _build_boolean(schema: bool, context: BuildContext) -> list[TypeExpression]:
    return [ANY if schema else NEVER]


def _build_reference(schema: dict[str, Any], context: BuildContext) -> list[TypeExpression]:
    parts = context.register(schema["$ref"])
    return [context.reference(parts)]


def _build_const(schema: dict[str, Any], context: BuildContext) -> list[TypeExpression]:
    return [build_literal(schema["const"], context)]


def _build_enum(schema: dict[str, Any], context: BuildContext) -> list[TypeExpression]:
    values = schema["enum"]
    if not isinstance(values, list) or not all(_is_primitive(value) for value in values):
        raise UnsupportedEnumError(values, context.current_path)
    # null members are carried by nullability, never as a literal
    return [Literal(value) for value in values if value is not None]


def _build_typed(schema: dict[str, Any], context: BuildContext) -> list[TypeExpression]:
    raw = schema["type"]
    tags = raw if isinstance(raw, list) else [raw]
    nullable = "null" in tags
    tags = [tag for tag in tags if tag != "null"]
    if not tags:
        return [NULL if nullable else NEVER]

    types: list[TypeExpression] = []
    for tag in tags:
        if tag == "object":
            types.append(build_object_type(schema, context))
        elif tag == "array":
            types.append(build_array_type(schema, context))
        elif isinstance(tag, str) and tag in PRIMITIVE_TYPES:
            types.append(PRIMITIVE_TYPES[tag])
        else:
            raise UnsupportedTypeError(tag, context.current_path)

    if nullable:
        return types
    return [NonNull(type_) for type_ in types]


def _build_combinator(schema: dict[str, Any], context: BuildContext) -> list[TypeExpression]:
    keyword = next(key for key in COMBINATORS if key in schema)
    branches = schema[keyword]
    if not isinstance(branches, list):
        raise UnsupportedSchemaError(
            schema, context.current_path, f"'{keyword}' must be a list"
        )
    types = [union_of(build_types(branch, context)) for branch in branches]
    # exclusivity of oneOf cannot be expressed, so it widens to a union
    if keyword == "allOf":
        return [intersection_of(types)]
    return [union_of(types)]


_SHAPE_BUILDERS: Final[dict[SchemaShape, Callable[[Any, BuildContext], list[TypeExpression]]]] = {
    SchemaShape.BOOLEAN: _build_boolean,
    SchemaShape.REFERENCE: _build_reference,
    SchemaShape.CONST: _build_const,
    SchemaShape.ENUM: _build_enum,
    SchemaShape.TYPED: _build_typed,
    SchemaShape.COMBINATOR: _build_combinator,
}


def build_types(schema: Any, context: BuildContext) -> list[TypeExpression]:
    """Translate a schema node into one or more type expressions.

    More than one expression means alternatives; callers collapse them
    with ``union_of``.

    Raises:
        UnsupportedSchemaError: If the node has no recognized shape.
        UnsupportedTypeError: If a ``type`` tag is unknown.
        UnsupportedEnumError: If an enum holds a non-primitive value.
    """
    shape = classify_schema(schema, context)
    return _SHAPE_BUILDERS[shape](schema, context)


def build_object_type(schema: dict[str, Any], context: BuildContext) -> ObjectOf:
    """Build an object type from properties, patternProperties and
    additionalProperties.

    Pattern and additional properties are merged into one index signature
    since only a single string index is allowed per object. The signature
    is required or read-only only when every contributing source is.
    """
    required = schema.get("required") or []
    properties = schema.get("properties") or {}
    pattern_properties = schema.get("patternProperties") or {}
    fields: list[Field] = []

    for name, property_schema in properties.items():
        fields.append(Field(
            name=name,
            type=union_of(build_types(property_schema, context)),
            required=name in required,
            read_only=_is_read_only(property_schema),
        ))

    index: IndexSignature | None = None
    additional = schema.get("additionalProperties")
    if pattern_properties or additional:
        sources: list[tuple[TypeExpression, bool, bool]] = [
            (
                union_of(build_types(pattern_schema, context)),
                pattern in required,
                _is_read_only(pattern_schema),
            )
            for pattern, pattern_schema in pattern_properties.items()
        ]
        if additional:
            sources.append((ANY, False, False))
        index = IndexSignature(
            value_type=union_of(type_ for type_, _, _ in sources),
            required=all(is_required for _, is_required, _ in sources),
            read_only=all(is_read_only for _, _, is_read_only in sources),
        )

    return ObjectOf(fields=tuple(fields), index=index)


def build_array_type(schema: dict[str, Any], context: BuildContext) -> TypeExpression:
    """Build an array type; a list of item schemas yields a union element.

    Unsatisfiable length bounds collapse to the uninhabited type.
    """
    min_items = schema.get("minItems")
    max_items = schema.get("maxItems")
    if _is_number(min_items) and _is_number(max_items) and min_items > max_items:
        return NEVER

    items = schema.get("items", True)
    item_schemas = items if isinstance(items, list) else [items]
    types: list[TypeExpression] = []
    for item_schema in item_schemas:
        types.extend(build_types(item_schema, context))
    return ArrayOf(union_of(types) if types else ANY)


def build_declaration(
    schema: Any,
    context: BuildContext,
    name: str | None = None,
    *,
    ambient: bool = False,
) -> Declaration:
    """Build a named declaration for a schema.

    The name falls back to the schema's title, then to ``Unknown``.
    """
    types = build_types(schema, context)
    title = schema.get("title") if isinstance(schema, dict) else None
    return Declaration(
        name=context.build_identifier(name or title or FALLBACK_NAME),
        type=union_of(types),
        exported=not ambient,
    )


def _is_read_only(schema: Any) -> bool:
    return isinstance(schema, dict) and bool(schema.get("readOnly"))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
