"""Python backend — builds IR trees from Python source using the ast module.

No external grammar is needed for Python. When the file does not parse as a
whole, the source is cut into top-level statements and each one is parsed on
its own: chunks that parse contribute their declarations, chunks that don't
become error markers. Independent declarations after a broken one survive.
"""

from __future__ import annotations

import ast
import logging
import re
import textwrap

from distiller.backends.base import ParserBackend
from distiller.ir.models import (
    IRClass,
    IRErrorMarker,
    IRField,
    IRFile,
    IRFunction,
    IRImport,
    IRImportedSymbol,
    IRInterface,
    IRNode,
    IRParameter,
    IRTypeAlias,
    Modifier,
    ParseError,
    SourceSpan,
)
from distiller.ir.visibility import classify_visibility

logger = logging.getLogger(__name__)

LANGUAGE = "python"

# Top-level lines that continue the previous statement rather than start one
_CONTINUATION_RE = re.compile(r"^(?:else\b|elif\b|except\b|finally\b|case\b|[)\]}])")

_INTERFACE_BASES = {"Protocol", "typing.Protocol", "typing_extensions.Protocol"}
_ABSTRACT_BASES = {"ABC", "abc.ABC"}


class PythonBackend(ParserBackend):
    language = LANGUAGE
    extensions = (".py", ".pyi")

    def process(self, source: bytes, filename: str) -> IRFile:
        """Parse a Python file into an IR tree.

        Args:
            source: Raw file contents; decoded as UTF-8 with replacement.
            filename: Path recorded on the tree and used in messages.
        """
        text = source.decode("utf-8-sig", errors="replace")
        lines = text.splitlines(keepends=True)
        errors: list[ParseError] = []

        try:
            tree = ast.parse(text, filename=filename)
        except SyntaxError as e:
            logger.info("%s: syntax error at line %s, recovering per statement", filename, e.lineno)
            children, errors = self._recover(text, lines, filename)
            doc = ""
        else:
            children = _Converter(text, lines).body(tree.body, container="")
            doc = ast.get_docstring(tree) or ""

        return IRFile(
            name=filename,
            path=filename,
            language=LANGUAGE,
            span=_file_span(lines),
            doc=doc,
            children=children,
            errors=errors,
        )

    def _recover(self, text: str, lines: list[str], filename: str) -> tuple[list[IRNode], list[ParseError]]:
        converter = _Converter(text, lines)
        children: list[IRNode] = []
        errors: list[ParseError] = []

        for start, end in top_level_chunks(lines):
            chunk = "".join(lines[start:end])
            try:
                tree = ast.parse(chunk, filename=filename)
            except SyntaxError as e:
                line = start + (e.lineno or 1)
                column = e.offset or 1
                errors.append(ParseError(message=e.msg, span=SourceSpan(line, column, line, column)))
                children.append(
                    IRErrorMarker(
                        span=SourceSpan(start + 1, 1, end, len(lines[end - 1].rstrip("\r\n"))),
                        message=e.msg,
                    )
                )
                continue
            ast.increment_lineno(tree, start)
            children.extend(converter.body(tree.body, container=""))

        return children, errors


def top_level_chunks(lines: list[str]) -> list[tuple[int, int]]:
    """0-based ``[start, end)`` ranges, one per top-level statement.

    Decorators stay with the definition they decorate, and ``else``,
    ``except`` and similar clauses stay with the statement they continue.
    Leading blank and comment lines belong to the first chunk.
    """
    starts: list[int] = []
    in_decorator = False
    for i, line in enumerate(lines):
        stripped = line.strip()
        if not stripped or line[0] in " \t" or stripped.startswith("#"):
            continue
        if _CONTINUATION_RE.match(stripped):
            continue
        if in_decorator:
            in_decorator = stripped.startswith("@")
            continue
        starts.append(i)
        in_decorator = stripped.startswith("@")

    if not starts:
        return [(0, len(lines))] if lines else []
    starts[0] = 0
    bounds = starts + [len(lines)]
    return [(bounds[k], bounds[k + 1]) for k in range(len(starts))]


def _file_span(lines: list[str]) -> SourceSpan:
    if not lines:
        return SourceSpan()
    last = lines[-1].rstrip("\r\n")
    return SourceSpan(1, 1, len(lines), max(len(last.encode()), 1))


def _span(node: ast.stmt) -> SourceSpan:
    start = node.lineno
    for decorator in getattr(node, "decorator_list", []):
        start = min(start, decorator.lineno)
    return SourceSpan(
        start,
        node.col_offset + 1,
        node.end_lineno or node.lineno,
        node.end_col_offset or node.col_offset + 1,
    )


def _is_docstring(node: ast.stmt) -> bool:
    return (
        isinstance(node, ast.Expr)
        and isinstance(node.value, ast.Constant)
        and isinstance(node.value.value, str)
    )


def _unparse(node: ast.AST | None) -> str:
    return ast.unparse(node) if node is not None else ""


class _Converter:
    """Turns ast statements into IR nodes for one file."""

    def __init__(self, text: str, lines: list[str]):
        self.text = text
        self.lines = lines

    def body(self, statements: list[ast.stmt], container: str) -> list[IRNode]:
        nodes: list[IRNode] = []
        for stmt in statements:
            nodes.extend(self.statement(stmt, container))
        return nodes

    def statement(self, node: ast.stmt, container: str) -> list[IRNode]:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            return [self.function(node, container)]
        if isinstance(node, ast.ClassDef):
            return [self.klass(node, container)]
        if isinstance(node, ast.Import):
            return [self.plain_import(node, alias) for alias in node.names]
        if isinstance(node, ast.ImportFrom):
            return [self.from_import(node)]
        if isinstance(node, (ast.Assign, ast.AnnAssign)):
            return self.assignment(node, container)
        if hasattr(ast, "TypeAlias") and isinstance(node, ast.TypeAlias):
            return [self.type_alias_stmt(node)]
        # Guarded definitions: if TYPE_CHECKING, try/except ImportError
        if isinstance(node, ast.If):
            return self.body(node.body, container) + self.body(node.orelse, container)
        if isinstance(node, ast.Try):
            nested = self.body(node.body, container)
            for handler in node.handlers:
                nested += self.body(handler.body, container)
            return nested + self.body(node.orelse, container) + self.body(node.finalbody, container)
        return []

    # --- Declarations ---

    def function(self, node: ast.FunctionDef | ast.AsyncFunctionDef, container: str) -> IRFunction:
        decorators = [_unparse(d) for d in node.decorator_list]
        names = {d.split("(")[0].rsplit(".", 1)[-1] for d in decorators}

        modifiers = set()
        if isinstance(node, ast.AsyncFunctionDef):
            modifiers.add(Modifier.ASYNC)
        if "staticmethod" in names:
            modifiers.add(Modifier.STATIC)
        if "abstractmethod" in names:
            modifiers.add(Modifier.ABSTRACT)
        if "override" in names:
            modifiers.add(Modifier.OVERRIDE)
        if "final" in names:
            modifiers.add(Modifier.FINAL)

        skip_first = bool(container) and "staticmethod" not in names
        return IRFunction(
            name=node.name,
            span=_span(node),
            visibility=classify_visibility(LANGUAGE, node.name, container=container),
            modifiers=frozenset(modifiers),
            doc=ast.get_docstring(node) or "",
            decorators=decorators,
            parameters=_parameters(node.args, skip_first),
            return_type=_unparse(node.returns),
            type_params=_type_params(node),
            implementation=self.implementation(node),
        )

    def klass(self, node: ast.ClassDef, container: str) -> IRClass | IRInterface:
        bases = [_unparse(base) for base in node.bases]
        type_params = _type_params(node)
        for base in node.bases:
            # class Box(Generic[T]) declares T
            if isinstance(base, ast.Subscript) and _unparse(base.value).endswith("Generic"):
                type_params += [p.strip() for p in _unparse(base.slice).strip("()").split(",")]

        common = dict(
            name=node.name,
            span=_span(node),
            visibility=classify_visibility(LANGUAGE, node.name, container=container),
            doc=ast.get_docstring(node) or "",
            decorators=[_unparse(d) for d in node.decorator_list],
            children=self.body(node.body, container="class"),
            type_params=type_params,
        )

        if any(b.split("[")[0] in _INTERFACE_BASES for b in bases):
            extends = [b for b in bases if b.split("[")[0] not in _INTERFACE_BASES]
            return IRInterface(extends=extends, **common)

        modifiers = set()
        metaclass = next((_unparse(k.value) for k in node.keywords if k.arg == "metaclass"), "")
        if _ABSTRACT_BASES.intersection(bases) or metaclass.endswith("ABCMeta"):
            modifiers.add(Modifier.ABSTRACT)
        return IRClass(
            modifiers=frozenset(modifiers),
            extends=[b for b in bases if not b.startswith("Generic[")],
            **common,
        )

    def assignment(self, node: ast.Assign | ast.AnnAssign, container: str) -> list[IRNode]:
        annotation = _unparse(node.annotation) if isinstance(node, ast.AnnAssign) else ""
        targets = node.targets if isinstance(node, ast.Assign) else [node.target]
        value = _unparse(node.value) if node.value is not None else None

        nodes: list[IRNode] = []
        for target in targets:
            if not isinstance(target, ast.Name):
                continue
            name = target.id
            if annotation.rsplit(".", 1)[-1] == "TypeAlias":
                nodes.append(
                    IRTypeAlias(
                        name=name,
                        span=_span(node),
                        visibility=classify_visibility(LANGUAGE, name, container=container),
                        type_ref=value or "",
                    )
                )
                continue

            modifiers = set()
            if name.isupper():
                modifiers.add(Modifier.CONSTANT)
            if annotation.startswith(("Final", "typing.Final")):
                modifiers.add(Modifier.FINAL)
            if annotation.startswith(("ClassVar", "typing.ClassVar")):
                modifiers.add(Modifier.STATIC)
            nodes.append(
                IRField(
                    name=name,
                    span=_span(node),
                    visibility=classify_visibility(LANGUAGE, name, container=container),
                    modifiers=frozenset(modifiers),
                    type_ref=annotation,
                    default_value=value,
                )
            )
        return nodes

    def type_alias_stmt(self, node: ast.stmt) -> IRTypeAlias:
        name = _unparse(node.name)
        return IRTypeAlias(
            name=name,
            span=_span(node),
            visibility=classify_visibility(LANGUAGE, name),
            type_ref=_unparse(node.value),
            type_params=_type_params(node),
        )

    # --- Imports ---

    def plain_import(self, node: ast.Import, alias: ast.alias) -> IRImport:
        return IRImport(
            name=alias.asname or alias.name.split(".")[0],
            span=_span(node),
            module=alias.name,
            symbols=[IRImportedSymbol(alias.name, alias.asname or "")] if alias.asname else [],
        )

    def from_import(self, node: ast.ImportFrom) -> IRImport:
        module = "." * (node.level or 0) + (node.module or "")
        wildcard = any(alias.name == "*" for alias in node.names)
        return IRImport(
            span=_span(node),
            module=module,
            symbols=[] if wildcard else [IRImportedSymbol(a.name, a.asname or "") for a in node.names],
            is_wildcard=wildcard,
            is_side_effect=module == "__future__",
        )

    # --- Bodies ---

    def implementation(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> str | None:
        """The body source without the docstring, dedented; None if nothing is left."""
        body = node.body[1:] if node.body and _is_docstring(node.body[0]) else node.body
        if not body:
            return None
        first = body[0]
        if first.lineno == node.lineno:
            # def f(): return 1
            return "; ".join(ast.get_source_segment(self.text, s) or "" for s in body)
        end = node.end_lineno or first.lineno
        return textwrap.dedent("".join(self.lines[first.lineno - 1 : end])).rstrip()


def _parameters(args: ast.arguments, skip_first: bool) -> list[IRParameter]:
    positional = args.posonlyargs + args.args
    defaults: list[ast.expr | None] = [None] * (len(positional) - len(args.defaults)) + list(args.defaults)

    params = [
        IRParameter(arg.arg, _unparse(arg.annotation), _unparse(default) if default is not None else None)
        for arg, default in zip(positional, defaults)
    ]
    # self / cls
    if skip_first and params:
        params = params[1:]

    if args.vararg:
        params.append(IRParameter(f"*{args.vararg.arg}", _unparse(args.vararg.annotation)))
    for arg, default in zip(args.kwonlyargs, args.kw_defaults):
        params.append(
            IRParameter(arg.arg, _unparse(arg.annotation), _unparse(default) if default is not None else None)
        )
    if args.kwarg:
        params.append(IRParameter(f"**{args.kwarg.arg}", _unparse(args.kwarg.annotation)))
    return params


def _type_params(node: ast.AST) -> list[str]:
    # PEP 695 syntax, Python 3.12+
    return [_unparse(p) for p in getattr(node, "type_params", [])]
