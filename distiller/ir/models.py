"""IR data models — the language-agnostic node tree.

Backends build one tree per source file; the stripper derives new trees
from it and the renderers read it. Nothing downstream of a backend mutates
a tree in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass, replace
from enum import Enum
from typing import ClassVar

IR_VERSION = "1.0"


class NodeKind(Enum):
    FILE = "file"
    PACKAGE = "package"
    IMPORT = "import"
    CLASS = "class"
    INTERFACE = "interface"
    FUNCTION = "function"
    FIELD = "field"
    TYPE_ALIAS = "type_alias"
    ERROR_MARKER = "error_marker"


class Visibility(Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    INTERNAL = "internal"
    UNSPECIFIED = "unspecified"


class Modifier(Enum):
    STATIC = "static"
    FINAL = "final"
    CONSTANT = "const"
    ABSTRACT = "abstract"
    ASYNC = "async"
    READONLY = "readonly"
    OVERRIDE = "override"
    VIRTUAL = "virtual"
    SEALED = "sealed"
    EXPORT = "export"


# Kinds that declare a named API element and are subject to visibility filtering
DECLARATION_KINDS = frozenset(
    {
        NodeKind.CLASS,
        NodeKind.INTERFACE,
        NodeKind.FUNCTION,
        NodeKind.FIELD,
        NodeKind.TYPE_ALIAS,
    }
)

# Kinds whose children list may be non-empty
CONTAINER_KINDS = frozenset(
    {NodeKind.FILE, NodeKind.PACKAGE, NodeKind.CLASS, NodeKind.INTERFACE}
)

NON_PUBLIC = frozenset({Visibility.PRIVATE, Visibility.PROTECTED, Visibility.INTERNAL})


@dataclass(frozen=True)
class SourceSpan:
    """A 1-based, inclusive source range. Zero lines mean "unknown"."""

    start_line: int = 0
    start_column: int = 0
    end_line: int = 0
    end_column: int = 0

    @property
    def is_known(self) -> bool:
        return self.start_line > 0

    def contains(self, other: SourceSpan) -> bool:
        if not (self.is_known and other.is_known):
            return True
        return (self.start_line, self.start_column) <= (
            other.start_line,
            other.start_column,
        ) and (other.end_line, other.end_column) <= (self.end_line, self.end_column)

    def clamp(self, other: SourceSpan) -> SourceSpan:
        """Return *other* narrowed so that it lies inside this span."""
        if self.contains(other):
            return other
        start = max((self.start_line, self.start_column), (other.start_line, other.start_column))
        end = min((self.end_line, self.end_column), (other.end_line, other.end_column))
        if end < start:
            end = start
        return SourceSpan(start[0], start[1], end[0], end[1])


@dataclass
class IRParameter:
    """A function parameter. ``name`` may be empty (unnamed parameters)."""

    name: str = ""
    type_ref: str = ""
    default_value: str | None = None


@dataclass
class IRImportedSymbol:
    name: str
    alias: str = ""


@dataclass
class ParseError:
    """A recoverable parse failure recorded on the file root."""

    message: str
    span: SourceSpan = field(default_factory=SourceSpan)


# --- Nodes ---


@dataclass
class IRNode:
    """Attributes shared by every node kind."""

    KIND: ClassVar[NodeKind]

    name: str = ""
    span: SourceSpan = field(default_factory=SourceSpan)
    visibility: Visibility = Visibility.UNSPECIFIED
    modifiers: frozenset[Modifier] = frozenset()
    type_ref: str = ""
    default_value: str | None = None
    doc: str = ""
    decorators: list[str] = field(default_factory=list)
    children: list[IRNode] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.modifiers = frozenset(self.modifiers)
        # Best-effort: a child never extends past its parent
        if self.span.is_known:
            for child in self.children:
                if not self.span.contains(child.span):
                    child.span = self.span.clamp(child.span)

    @property
    def kind(self) -> NodeKind:
        return self.KIND

    @property
    def is_declaration(self) -> bool:
        return self.KIND in DECLARATION_KINDS

    def has_modifier(self, modifier: Modifier) -> bool:
        return modifier in self.modifiers

    def derive(self, **changes) -> IRNode:
        """Return a copy with *changes* applied.

        List fields are copied, as are the parameter, symbol and error
        records inside them. Child nodes are shared unless *changes* replaces
        them.
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name not in changes and isinstance(value, list):
                changes[f.name] = [_copy_record(v) for v in value]
        return replace(self, **changes)


def _copy_record(value):
    if is_dataclass(value) and not isinstance(value, IRNode):
        return replace(value)
    return value


@dataclass
class IRFile(IRNode):
    """The distilled file root."""

    KIND: ClassVar[NodeKind] = NodeKind.FILE

    path: str = ""
    language: str = ""
    version: str = IR_VERSION
    errors: list[ParseError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


@dataclass
class IRPackage(IRNode):
    KIND: ClassVar[NodeKind] = NodeKind.PACKAGE


@dataclass
class IRImport(IRNode):
    """An import statement as seen by a backend."""

    KIND: ClassVar[NodeKind] = NodeKind.IMPORT

    module: str = ""
    symbols: list[IRImportedSymbol] = field(default_factory=list)
    is_wildcard: bool = False
    is_side_effect: bool = False


@dataclass
class IRClass(IRNode):
    KIND: ClassVar[NodeKind] = NodeKind.CLASS

    type_params: list[str] = field(default_factory=list)
    extends: list[str] = field(default_factory=list)
    implements: list[str] = field(default_factory=list)


@dataclass
class IRInterface(IRNode):
    KIND: ClassVar[NodeKind] = NodeKind.INTERFACE

    type_params: list[str] = field(default_factory=list)
    extends: list[str] = field(default_factory=list)


@dataclass
class IRFunction(IRNode):
    """A function or method.

    ``implementation`` is the opaque body text; ``None`` means no body is
    carried (declaration only, or stripped).
    """

    KIND: ClassVar[NodeKind] = NodeKind.FUNCTION

    parameters: list[IRParameter] = field(default_factory=list)
    return_type: str = ""
    type_params: list[str] = field(default_factory=list)
    implementation: str | None = None


@dataclass
class IRField(IRNode):
    KIND: ClassVar[NodeKind] = NodeKind.FIELD


@dataclass
class IRTypeAlias(IRNode):
    KIND: ClassVar[NodeKind] = NodeKind.TYPE_ALIAS

    type_params: list[str] = field(default_factory=list)


@dataclass
class IRErrorMarker(IRNode):
    KIND: ClassVar[NodeKind] = NodeKind.ERROR_MARKER

    message: str = ""
