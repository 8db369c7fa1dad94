"""Namespace Tree Assembler - groups declarations by their reference paths."""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from ..shared import build_identifier as default_build_identifier
from .ir import Declaration, NamespaceNode


def assemble(
    entries: Iterable[tuple[Sequence[str], Declaration]],
    *,
    build_identifier: Callable[[str], str] = default_build_identifier,
) -> NamespaceNode:
    """Fold ``(path, declaration)`` pairs into a namespace tree.

    Every segment but the last becomes a namespace; the declaration is
    attached to the innermost one, or to the root for single-segment
    paths. Namespaces are created on first use so the tree keeps
    first-arrival order.
    """
    root = NamespaceNode(name="")
    for path, declaration in entries:
        node = root
        for part in path[:-1]:
            name = build_identifier(part)
            child = node.child(name)
            if child is None:
                child = NamespaceNode(name=name)
                node.children.append(child)
            node = child
        node.declarations.append(declaration)
    return root
