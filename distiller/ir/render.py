"""Reference renderers for IR trees.

These are deliberately plain: a JSON-ready dict and an indented outline.
Richer per-language formatters consume the same trees.
"""

from __future__ import annotations

from dataclasses import fields
from enum import Enum
from typing import Any

from distiller.ir.models import (
    IRClass,
    IRErrorMarker,
    IRField,
    IRFile,
    IRFunction,
    IRImport,
    IRInterface,
    IRNode,
    IRPackage,
    IRTypeAlias,
    SourceSpan,
    Visibility,
)

_VISIBILITY_PREFIX = {
    Visibility.PUBLIC: "",
    Visibility.UNSPECIFIED: "",
    Visibility.PROTECTED: "# ",
    Visibility.PRIVATE: "- ",
    Visibility.INTERNAL: "~ ",
}

INDENT = "    "


def to_dict(node: IRNode) -> dict[str, Any]:
    """Convert a node (and its subtree) into JSON-serializable data."""
    data: dict[str, Any] = {"kind": node.kind.value}
    for f in fields(node):
        data[f.name] = _encode(getattr(node, f.name))
    return data


def _encode(value: Any) -> Any:
    if isinstance(value, IRNode):
        return to_dict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, SourceSpan):
        return [value.start_line, value.start_column, value.end_line, value.end_column]
    if isinstance(value, frozenset):
        return sorted(_encode(v) for v in value)
    if isinstance(value, list):
        return [_encode(v) for v in value]
    if hasattr(value, "__dataclass_fields__"):
        return {f.name: _encode(getattr(value, f.name)) for f in fields(value)}
    return value


def render_text(root: IRFile) -> str:
    """Render a file tree as an indented outline wrapped in a file marker."""
    lines = [f'<file path="{root.path}">']
    for child in root.children:
        _render(child, 0, lines)
    for error in root.errors:
        lines.append(f"// parse error at line {error.span.start_line}: {error.message}")
    lines.append("</file>")
    return "\n".join(lines) + "\n"


def render_many(roots: list[IRFile]) -> str:
    return "\n".join(render_text(root) for root in roots)


def _render(node: IRNode, depth: int, lines: list[str]) -> None:
    pad = INDENT * depth
    prefix = _VISIBILITY_PREFIX[node.visibility]
    modifiers = "".join(f"{m.value} " for m in sorted(node.modifiers, key=lambda m: m.value))

    for decorator in node.decorators:
        lines.append(f"{pad}@{decorator}")

    if isinstance(node, IRPackage):
        lines.append(f"{pad}package {node.name}")
    elif isinstance(node, IRImport):
        lines.append(pad + _import_line(node))
    elif isinstance(node, IRClass):
        bases = node.extends + node.implements
        suffix = f"({', '.join(bases)})" if bases else ""
        lines.append(f"{pad}{prefix}{modifiers}class {node.name}{_type_params(node)}{suffix}:")
    elif isinstance(node, IRInterface):
        suffix = f"({', '.join(node.extends)})" if node.extends else ""
        lines.append(f"{pad}{prefix}interface {node.name}{_type_params(node)}{suffix}:")
    elif isinstance(node, IRFunction):
        params = ", ".join(_param(p.name, p.type_ref, p.default_value) for p in node.parameters)
        returns = f" -> {node.return_type}" if node.return_type else ""
        lines.append(f"{pad}{prefix}{modifiers}def {node.name}{_type_params(node)}({params}){returns}")
    elif isinstance(node, IRField):
        lines.append(f"{pad}{prefix}{modifiers}{_param(node.name, node.type_ref, node.default_value)}")
    elif isinstance(node, IRTypeAlias):
        lines.append(f"{pad}{prefix}type {node.name}{_type_params(node)} = {node.type_ref}")
    elif isinstance(node, IRErrorMarker):
        lines.append(f"{pad}// error at line {node.span.start_line}: {node.message}")

    if node.doc:
        doc_pad = pad + INDENT if node.children or isinstance(node, IRFunction) else pad
        lines.append(f'{doc_pad}"""{node.doc}"""')

    for child in node.children:
        _render(child, depth + 1, lines)

    if isinstance(node, IRFunction) and node.implementation:
        for body_line in node.implementation.splitlines():
            lines.append(f"{pad}{INDENT}{body_line}" if body_line.strip() else "")


def _import_line(node: IRImport) -> str:
    if node.is_wildcard:
        return f"import {node.module}.*"
    if not node.symbols:
        return f"import {node.module}"
    if len(node.symbols) == 1 and node.symbols[0].name == node.module:
        # import a.b as c
        return f"import {node.module} as {node.symbols[0].alias}"
    names = ", ".join(f"{s.name} as {s.alias}" if s.alias else s.name for s in node.symbols)
    return f"from {node.module} import {names}"


def _type_params(node: IRClass | IRInterface | IRFunction | IRTypeAlias) -> str:
    return f"[{', '.join(node.type_params)}]" if node.type_params else ""


def _param(name: str, type_ref: str, default: str | None) -> str:
    text = name
    if type_ref:
        text = f"{text}: {type_ref}" if text else type_ref
    if default is not None:
        text = f"{text} = {default}"
    return text
