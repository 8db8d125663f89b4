"""Python import filter."""

from __future__ import annotations

import re

from distiller.importfilter.base import ImportFilter, has_trailing_statement, search_for_usage
from distiller.importfilter.models import ImportStatement

_GUARD_RE = re.compile(r"^(?:if|elif|else|try|except|finally)\b.*:\s*(?:#.*)?$")
_DOCSTRING_RE = re.compile(r"""^[rRuUbB]{0,2}("\"\"|''')""")
_TRAILING_COMMENT_RE = re.compile(r"\s*#.*$")


class PythonImportFilter(ImportFilter):
    """``import a.b [as c]`` and ``from m import x [as y]`` in all their layouts.

    The import section may be wrapped in ``if TYPE_CHECKING:`` or
    ``try:``/``except ImportError:`` guards and preceded by a module
    docstring.
    """

    language = "python"
    aliases = ("py",)
    comment_prefixes = ("#",)
    import_keywords = ("import", "from")
    patterns = {
        "import": r"^import\s+([\w.]+(?:\s+as\s+\w+)?(?:\s*,\s*[\w.]+(?:\s+as\s+\w+)?)*)\s*;?$",
        "from": r"^from\s+(\.*[\w.]*)\s+import\s+(.+?)\s*;?$",
    }

    def match_statement(self, lines, i, end):
        trimmed = lines[i].strip()
        if not trimmed.startswith(("import ", "from ")):
            return [], 0

        last = i
        logical = _TRAILING_COMMENT_RE.sub("", trimmed)
        while logical.endswith("\\") and last + 1 < end:
            last += 1
            logical = logical[:-1] + " " + _TRAILING_COMMENT_RE.sub("", lines[last].strip())

        if "(" in logical and ")" not in logical:
            close = self.find_closing(lines, last + 1, end, ")")
            if close is None:
                return [], 0
            for j in range(last + 1, close + 1):
                logical += " " + _TRAILING_COMMENT_RE.sub("", lines[j].strip())
            last = close

        if has_trailing_statement(logical):
            return [], 0

        m = self.compiled["from"].match(logical)
        if m:
            return [self._from_import(lines, i, last, m.group(1), m.group(2))], last - i + 1

        m = self.compiled["import"].match(logical)
        if m:
            return [self._plain_import(lines, i, last, m.group(1))], last - i + 1

        return [], 0

    def _from_import(self, lines, first, last, module, names_part):
        names_part = names_part.strip().strip("()").strip()
        if names_part == "*":
            return self.statement(lines, first, last, module=module, is_wildcard=True, form="from")

        names, aliases = [], {}
        for part in names_part.split(","):
            part = part.strip()
            if not part:
                continue
            name, _, alias = part.partition(" as ")
            name = name.strip()
            names.append(name)
            if alias.strip():
                aliases[name] = alias.strip()

        return self.statement(
            lines,
            first,
            last,
            module=module,
            imported_names=names,
            aliases=aliases,
            is_side_effect=module == "__future__",
            form="from",
        )

    def _plain_import(self, lines, first, last, modules_part):
        names, aliases = [], {}
        modules = []
        for part in modules_part.split(","):
            module, _, alias = part.strip().partition(" as ")
            module = module.strip()
            modules.append(module)
            if alias.strip():
                names.append(module)
                aliases[module] = alias.strip()
            else:
                # import a.b.c binds "a"
                names.append(module.split(".")[0])

        return self.statement(
            lines,
            first,
            last,
            module=", ".join(modules),
            imported_names=names,
            aliases=aliases,
            form="import",
        )

    def skip_header(self, lines, i, end):
        trimmed = lines[i].strip()
        if trimmed == "pass" or _GUARD_RE.match(trimmed):
            return 1

        m = _DOCSTRING_RE.match(trimmed)
        if not m:
            return 0
        quote = m.group(1)
        rest = trimmed[m.end() :]
        if quote in rest:
            return 1
        close = self.find_closing(lines, i + 1, end, quote)
        return 0 if close is None else close - i + 1

    def is_used(self, imp, lines, after, end, start=0):
        if super().is_used(imp, lines, after, end, start):
            return True
        # Names tested by guard lines inside the import section (if TYPE_CHECKING:)
        guards = [line for line in lines[start:after] if _GUARD_RE.match(line.strip())]
        return any(search_for_usage(guards, name, 0) for name in self.bound_names(imp))
