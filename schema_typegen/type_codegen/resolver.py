"""
Reference Resolution Engine - declares every schema reachable through $refs.

Resolution runs a worklist over the references discovered while building:
each pending path is declared exactly once, and declaring it may queue
further paths. A path already declared is never rebuilt, so cyclic and
self-referential schemas terminate on their second encounter.
"""

from __future__ import annotations

from typing import Any, Callable, Final, Sequence

from ..shared import ReferenceNotFoundError, build_identifier, split_ref
from .builder import BuildContext, build_declaration
from .ir import Declaration, NamespaceNode
from .tree import assemble

DEFAULT_ROOT_NAME: Final[str] = "Main"

_MISSING = object()


def resolve_reference(document: Any, path: str | Sequence[str]) -> Any:
    """Look up a reference path inside a document.

    ``path`` is either a reference string or its segments. Returns ``None``
    when the path does not exist; callers are expected to only ask for
    paths the document defines.
    """
    parts = split_ref(path) if isinstance(path, str) else list(path)
    node = document
    for part in parts:
        node = _step(node, part)
        if node is _MISSING:
            return None
    return node


def _step(node: Any, part: str) -> Any:
    if isinstance(node, dict):
        return node.get(part, _MISSING)
    if isinstance(node, list) and part.isdigit():
        index = int(part)
        return node[index] if index < len(node) else _MISSING
    return _MISSING


class ReferenceResolver:
    """Declares discovered references until none is left pending.

    The resolver owns the ``BuildContext`` of one compilation; anything
    built through ``context`` before calling ``resolve`` feeds the worklist.
    """

    __slots__ = ("document", "context", "_resolved")

    def __init__(
        self,
        document: Any,
        context: BuildContext | None = None,
    ) -> None:
        self.document = document
        self.context = context or BuildContext()
        self._resolved: set[str] = set()

    @property
    def resolved(self) -> frozenset[str]:
        return frozenset(self._resolved)

    def resolve(self) -> list[tuple[tuple[str, ...], Declaration]]:
        """Declare every pending reference, breadth first.

        Returns:
            ``(path, declaration)`` pairs in first-discovery order.

        Raises:
            ReferenceNotFoundError: If a reference targets nothing.
        """
        context = self.context
        results: list[tuple[tuple[str, ...], Declaration]] = []
        while context.pending:
            ref = context.pending.popleft()
            if ref in self._resolved:
                continue
            self._resolved.add(ref)

            parts = context.discovered[ref]
            target = resolve_reference(self.document, parts)
            if target is None:
                raise ReferenceNotFoundError(ref, context.current_path)

            previous_path, context.current_path = context.current_path, ref
            try:
                declaration = build_declaration(
                    target,
                    context,
                    parts[-1],
                    ambient=len(parts) == 1,
                )
            finally:
                context.current_path = previous_path
            results.append((parts, declaration))
        return results


def compile_schema(
    document: Any,
    root_name: str | None = None,
    *,
    build_identifier: Callable[[str], str] = build_identifier,
) -> NamespaceNode:
    """Compile a JSON Schema document into a declaration tree.

    The document itself becomes an ambient top-level declaration named
    ``root_name`` (or the document title, or ``Main``); every schema it
    references is declared inside namespaces mirroring its path.
    """
    title = document.get("title") if isinstance(document, dict) else None
    name = root_name or title or DEFAULT_ROOT_NAME
    context = BuildContext(
        build_identifier=build_identifier,
        root_name=name,
    )
    root = build_declaration(document, context, name, ambient=True)
    resolved = ReferenceResolver(document, context).resolve()

    tree = assemble(resolved, build_identifier=build_identifier)
    tree.declarations.insert(0, root)
    return tree
