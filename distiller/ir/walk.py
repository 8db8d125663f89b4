"""Traversal helpers over the closed set of node kinds."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator

from distiller.ir.models import CONTAINER_KINDS, IRNode, NodeKind


def iter_nodes(root: IRNode) -> Iterator[IRNode]:
    """Yield *root* and every descendant in pre-order, depth-first."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def iter_with_parent(
    root: IRNode, parent: IRNode | None = None
) -> Iterator[tuple[IRNode, IRNode | None]]:
    yield root, parent
    for child in root.children:
        yield from iter_with_parent(child, root)


def count_kinds(root: IRNode) -> Counter[NodeKind]:
    return Counter(node.kind for node in iter_nodes(root))


def find(root: IRNode, kind: NodeKind, name: str | None = None) -> list[IRNode]:
    """All nodes of *kind* (optionally with *name*), in document order."""
    return [
        node
        for node in iter_nodes(root)
        if node.kind == kind and (name is None or node.name == name)
    ]


def check_tree(root: IRNode) -> list[str]:
    """Report structural problems: children on leaf kinds, spans escaping parents."""
    problems = []
    for node, parent in iter_with_parent(root):
        if node.children and node.kind not in CONTAINER_KINDS:
            problems.append(f"{node.kind.value} '{node.name}' has children")
        if parent is not None and not parent.span.contains(node.span):
            problems.append(
                f"{node.kind.value} '{node.name}' lies outside {parent.kind.value} '{parent.name}'"
            )
    return problems
