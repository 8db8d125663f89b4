"""JavaScript and TypeScript import filter (ES modules and CommonJS)."""

from __future__ import annotations

import re

from distiller.importfilter.base import ImportFilter, has_trailing_statement

_STARTS_IMPORT_RE = re.compile(r"^(?:import\b|(?:const|let|var)\s)")
_DIRECTIVE_RE = re.compile(r"""^(?:#!.*|(['"])use \w+\1;?)$""")
_REEXPORT_RE = re.compile(r"""^export\s.*\bfrom\s+['"][^'"]+['"]\s*;?$""")
_TRAILING_COMMENT_RE = re.compile(r";\s*//.*$")
_NAMESPACE_RE = re.compile(r"^\*\s*as\s+([\w$]+)$")
_BRACES_RE = re.compile(r"\{(.*)\}")

_Q = r"""['"`]"""


class JavaScriptImportFilter(ImportFilter):
    """ES ``import`` in every form plus ``require`` bindings.

    ``import 'x'`` and bare ``require('x')`` are side effects. Namespace
    imports (``* as ns``) bind ``ns`` and are analyzed like any other name.
    Re-exports and dynamic ``import()`` are never touched.
    """

    language = "javascript"
    aliases = ("js", "jsx", "mjs", "cjs", "typescript", "ts", "tsx")
    comment_prefixes = ("//", "/*", "*", "*/")
    import_keywords = ("import",)
    patterns = {
        "side_effect": rf"^import\s+{_Q}([^'\"`]+){_Q}\s*;?$",
        "from": rf"^import\s+(type\s+)?(.+?)\s+from\s+{_Q}([^'\"`]+){_Q}\s*;?$",
        "import_equals": rf"^import\s+(?:type\s+)?([\w$]+)\s*=\s*require\s*\(\s*{_Q}([^'\"`]+){_Q}\s*\)\s*;?$",
        "require": rf"^(?:const|let|var)\s+(.+?)\s*=\s*require\s*\(\s*{_Q}([^'\"`]+){_Q}\s*\)(\.[\w$]+)?\s*;?$",
        "bare_require": rf"^require\s*\(\s*{_Q}([^'\"`]+){_Q}\s*\)\s*;?$",
    }

    def match_statement(self, lines, i, end):
        trimmed = _TRAILING_COMMENT_RE.sub(";", lines[i].strip())

        m = self.compiled["bare_require"].match(trimmed)
        if m:
            return [self.statement(lines, i, i, module=m.group(1), is_side_effect=True, form="require")], 1

        if not _STARTS_IMPORT_RE.match(trimmed):
            return [], 0

        last = i
        logical = trimmed
        if "{" in logical and "}" not in logical:
            close = self.find_closing(lines, i + 1, end, "}")
            if close is None:
                return [], 0
            last = close
            logical = " ".join(
                _TRAILING_COMMENT_RE.sub(";", line.strip()) for line in lines[i : close + 1]
            )

        if has_trailing_statement(logical):
            return [], 0

        statement = self._parse(lines, i, last, logical)
        if statement is None:
            return [], 0
        return [statement], last - i + 1

    def _parse(self, lines, first, last, logical):
        m = self.compiled["side_effect"].match(logical)
        if m:
            return self.statement(lines, first, last, module=m.group(1), is_side_effect=True, form="import")

        m = self.compiled["from"].match(logical)
        if m:
            names, aliases = self._bindings(m.group(2))
            return self.statement(
                lines,
                first,
                last,
                module=m.group(3),
                imported_names=names,
                aliases=aliases,
                form="type" if m.group(1) else "import",
            )

        m = self.compiled["import_equals"].match(logical)
        if m:
            return self.statement(
                lines, first, last, module=m.group(2), imported_names=[m.group(1)], form="import-require"
            )

        m = self.compiled["require"].match(logical)
        if m:
            names, aliases = self._bindings(m.group(1), destructuring=True)
            return self.statement(
                lines,
                first,
                last,
                module=m.group(2),
                imported_names=names,
                aliases=aliases,
                form="require",
            )

        return None

    @staticmethod
    def _bindings(clause, destructuring=False):
        """Local names bound by an import clause or a require target."""
        names: list[str] = []
        aliases: dict[str, str] = {}
        separator = ":" if destructuring else " as "

        braces = _BRACES_RE.search(clause)
        rest = clause
        if braces:
            for spec in braces.group(1).split(","):
                spec = spec.strip()
                if spec.startswith("type "):
                    spec = spec[5:].strip()
                if spec.startswith("..."):
                    spec = spec[3:].strip()
                if not spec:
                    continue
                name, _, alias = spec.partition(separator)
                name = name.strip()
                # Destructuring defaults: { a = 1 }
                alias = alias.split("=")[0].strip()
                name = name.split("=")[0].strip()
                names.append(name)
                if alias:
                    aliases[name] = alias
            rest = clause[: braces.start()] + clause[braces.end() :]

        for part in rest.split(","):
            part = part.strip()
            if not part:
                continue
            namespace = _NAMESPACE_RE.match(part)
            names.append(namespace.group(1) if namespace else part)
        return names, aliases

    def skip_header(self, lines, i, end):
        trimmed = lines[i].strip()
        if _DIRECTIVE_RE.match(trimmed) or _REEXPORT_RE.match(trimmed):
            return 1
        return 0
