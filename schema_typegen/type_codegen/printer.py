"""
TypeScript printer for the type expression IR.

Type expressions are rendered in Python; the namespace layout of a whole
declaration tree comes from the ``declarations.d.ts.j2`` template.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .ir import (
    ArrayOf,
    Declaration,
    Field,
    IndexSignature,
    Intersection,
    Keyword,
    Literal,
    NamespaceNode,
    NonNull,
    ObjectOf,
    Reference,
    TypeExpression,
    Union,
)

TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"
INDENT: Final[str] = "    "

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def _property_name(name: str) -> str:
    return name if _IDENTIFIER.match(name) else json.dumps(name)


def render_literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value)


def _render_member(expr: TypeExpression, level: int, parent: type) -> str:
    rendered = render_type(expr, level)
    if isinstance(expr, (Union, Intersection)) and (
        isinstance(expr, parent) or parent is Intersection
    ):
        return f"({rendered})"
    return rendered


def _render_field(item: Field, level: int) -> str:
    modifier = "readonly " if item.read_only else ""
    optional = "" if item.required else "?"
    return f"{modifier}{_property_name(item.name)}{optional}: {render_type(item.type, level)};"


def _render_index(index: IndexSignature, level: int) -> str:
    modifier = "readonly " if index.read_only else ""
    return f"{modifier}[{index.key_name}: string]: {render_type(index.value_type, level)};"


def render_type(expr: TypeExpression, level: int = 0) -> str:
    """Render a type expression as TypeScript.

    ``level`` is the nesting depth of object literals, used for indentation.
    """
    if isinstance(expr, Keyword):
        return expr.name
    if isinstance(expr, Literal):
        return render_literal(expr.value)
    if isinstance(expr, NonNull):
        return f"NonNullable<{render_type(expr.inner, level)}>"
    if isinstance(expr, ArrayOf):
        item = render_type(expr.item, level)
        if isinstance(expr.item, (Union, Intersection)):
            item = f"({item})"
        return f"{item}[]"
    if isinstance(expr, Reference):
        return expr.qualified_name
    if isinstance(expr, Union):
        return " | ".join(_render_member(member, level, Union) for member in expr.members)
    if isinstance(expr, Intersection):
        return " & ".join(_render_member(member, level, Intersection) for member in expr.members)
    if isinstance(expr, ObjectOf):
        lines = [_render_field(item, level + 1) for item in expr.fields]
        if expr.index is not None:
            lines.append(_render_index(expr.index, level + 1))
        if not lines:
            return "{}"
        inner = INDENT * (level + 1)
        body = "\n".join(inner + line for line in lines)
        return "{\n" + body + "\n" + INDENT * level + "}"
    raise TypeError(f"Cannot render {expr!r}")


def render_declaration(declaration: Declaration) -> str:
    """Render a declaration as a ``type`` alias statement."""
    modifier = "export" if declaration.exported else "declare"
    return f"{modifier} type {declaration.name} = {render_type(declaration.type)};"


@dataclass
class PrinterContext:
    """Jinja environment with the pre-compiled declarations template."""

    template_env: Environment = field(init=False)

    def __post_init__(self) -> None:
        self.template_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            auto_reload=False,
        )
        self.template_env.filters["declaration"] = render_declaration
        self._declarations_template = self.template_env.get_template("declarations.d.ts.j2")

    @property
    def declarations_template(self):
        return self._declarations_template


def to_source(
    tree: NamespaceNode,
    ctx: PrinterContext | None = None,
    header: str | None = None,
) -> str:
    """Render a whole declaration tree as TypeScript declaration source."""
    ctx = ctx or PrinterContext()
    return ctx.declarations_template.render(tree=tree, header=header)
