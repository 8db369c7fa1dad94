"""
Type expression IR produced by the compiler.

The nodes mirror the primitives of the target type language; the printer
turns them into source text. Every node is immutable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final, Iterable, Union as TypingUnion

LiteralValue = TypingUnion[bool, int, float, str, None]


@dataclass(frozen=True, slots=True)
class Keyword:
    """A primitive type keyword such as ``string`` or ``never``."""

    name: str


@dataclass(frozen=True, slots=True)
class Literal:
    """A single literal value type; ``None`` is the null type."""

    value: LiteralValue


@dataclass(frozen=True, slots=True)
class NonNull:
    """A type guaranteed not to be null."""

    inner: TypeExpression


@dataclass(frozen=True, slots=True)
class ArrayOf:
    """A homogeneous array."""

    item: TypeExpression


@dataclass(frozen=True, slots=True)
class Field:
    """A named member of an object type."""

    name: str
    type: TypeExpression
    required: bool = False
    read_only: bool = False


@dataclass(frozen=True, slots=True)
class IndexSignature:
    """The single string-keyed index of an open-ended object type."""

    value_type: TypeExpression
    required: bool = False
    read_only: bool = False
    key_name: str = "pattern"


@dataclass(frozen=True, slots=True)
class ObjectOf:
    """An object type with ordered fields and an optional index signature."""

    fields: tuple[Field, ...] = ()
    index: IndexSignature | None = None


@dataclass(frozen=True, slots=True)
class Reference:
    """A qualified reference to a declaration, e.g. ``Components.Schemas.User``."""

    parts: tuple[str, ...]

    @property
    def qualified_name(self) -> str:
        return ".".join(self.parts)


@dataclass(frozen=True, slots=True)
class Union:
    members: tuple[TypeExpression, ...]


@dataclass(frozen=True, slots=True)
class Intersection:
    members: tuple[TypeExpression, ...]


TypeExpression = TypingUnion[
    Keyword,
    Literal,
    NonNull,
    ArrayOf,
    ObjectOf,
    Reference,
    Union,
    Intersection,
]

ANY: Final[Keyword] = Keyword("any")
NEVER: Final[Keyword] = Keyword("never")
UNKNOWN: Final[Keyword] = Keyword("unknown")
BOOLEAN: Final[Keyword] = Keyword("boolean")
NUMBER: Final[Keyword] = Keyword("number")
STRING: Final[Keyword] = Keyword("string")
NULL: Final[Literal] = Literal(None)


def union_of(types: Iterable[TypeExpression]) -> TypeExpression:
    """Combine types as a union without wrapping a lone member.

    An empty union is the uninhabited type.
    """
    members = tuple(types)
    if not members:
        return NEVER
    if len(members) == 1:
        return members[0]
    return Union(members)


def intersection_of(types: Iterable[TypeExpression]) -> TypeExpression:
    """Combine types as an intersection without wrapping a lone member.

    An empty intersection places no constraint and is ``unknown``.
    """
    members = tuple(types)
    if not members:
        return UNKNOWN
    if len(members) == 1:
        return members[0]
    return Intersection(members)


@dataclass(frozen=True, slots=True)
class Declaration:
    """A named type alias; ambient declarations are top-level ``declare``s."""

    name: str
    type: TypeExpression
    exported: bool = True

    @property
    def ambient(self) -> bool:
        return not self.exported


@dataclass(slots=True)
class NamespaceNode:
    """A namespace level of the declaration tree.

    The tree root has an empty name and holds top-level declarations.
    """

    name: str
    children: list[NamespaceNode] = field(default_factory=list)
    declarations: list[Declaration] = field(default_factory=list)

    def child(self, name: str) -> NamespaceNode | None:
        """Return the direct child namespace called ``name``, if any."""
        return next((node for node in self.children if node.name == name), None)

    def iter_declarations(self, prefix: tuple[str, ...] = ()):
        """Yield ``(namespace path, declaration)`` pairs depth-first."""
        path = prefix + (self.name,) if self.name else prefix
        for declaration in self.declarations:
            yield path, declaration
        for node in self.children:
            yield from node.iter_declarations(path)

    def find(self, *parts: str) -> Declaration | None:
        """Look up a declaration by its qualified name."""
        *namespaces, name = parts
        node: NamespaceNode | None = self
        for part in namespaces:
            node = node.child(part) if node else None
        if node is None:
            return None
        return next((d for d in node.declarations if d.name == name), None)
