"""Structural stripper — policy-driven tree-to-tree reduction.

``strip`` never mutates its input: every node on the output side is a new
object, so one parsed tree can be re-stripped under several policies.
Rules are applied per node in a fixed order:

1. visibility filter (drops non-public declarations with their subtree;
   methods declared inside an interface are exempt)
2. implementation filter (clears function bodies, keeps signatures)
3. comment filter (clears doc comments / docstrings)
4. import filter (drops import nodes at file scope)

Error markers are ordinary nodes and always survive.
"""

from __future__ import annotations

import logging
from typing import cast

from distiller.ir.models import (
    NON_PUBLIC,
    IRFile,
    IRFunction,
    IRNode,
    NodeKind,
)
from distiller.stripper.policy import StripPolicy

logger = logging.getLogger(__name__)

# Containers whose Import children count as file scope
_FILE_SCOPE = frozenset({NodeKind.FILE, NodeKind.PACKAGE})


def strip(root: IRFile, policy: StripPolicy) -> IRFile:
    """Return a new tree with *policy* applied to *root*."""
    # The root is neither a declaration nor an import, so it always survives
    result = cast(IRFile, _strip_node(root, policy, parent_kind=None))
    logger.debug("Stripped %s with %s", root.path, policy.flags() or "empty policy")
    return result


def _strip_node(node: IRNode, policy: StripPolicy, parent_kind: NodeKind | None) -> IRNode | None:
    if policy.remove_private and _is_hidden(node, parent_kind):
        return None

    if policy.remove_imports and node.kind == NodeKind.IMPORT and parent_kind in _FILE_SCOPE:
        return None

    changes: dict = {}

    if policy.remove_implementation and isinstance(node, IRFunction):
        changes["implementation"] = None

    if policy.remove_comments and node.doc:
        changes["doc"] = ""

    children = []
    for child in node.children:
        stripped = _strip_node(child, policy, node.kind)
        if stripped is not None:
            children.append(stripped)
    changes["children"] = children

    return node.derive(**changes)


def _is_hidden(node: IRNode, parent_kind: NodeKind | None) -> bool:
    if not node.is_declaration or node.visibility not in NON_PUBLIC:
        return False
    # Interface methods are part of the contract
    if node.kind == NodeKind.FUNCTION and parent_kind == NodeKind.INTERFACE:
        return False
    return True
