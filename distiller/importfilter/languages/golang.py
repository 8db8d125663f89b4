"""Go import filter."""

from __future__ import annotations

import re

from distiller.importfilter.base import ImportFilter

# Import paths whose package name is not simply the last path segment
SPECIAL_PACKAGE_NAMES = {
    "encoding/json": "json",
    "encoding/xml": "xml",
    "net/http": "http",
    "net/url": "url",
    "database/sql": "sql",
    "html/template": "template",
    "text/template": "template",
    "math/rand": "rand",
    "crypto/rand": "rand",
    "gopkg.in/yaml.v2": "yaml",
    "gopkg.in/yaml.v3": "yaml",
    "github.com/mattn/go-sqlite3": "sqlite3",
    "github.com/google/go-cmp/cmp": "cmp",
}

_VERSION_SEGMENT_RE = re.compile(r"^v\d+$")
_VERSION_SUFFIX_RE = re.compile(r"\.v\d+$")


class GoImportFilter(ImportFilter):
    """Single imports and ``import ( ... )`` blocks.

    Each spec inside a block is its own statement, so removing one spec
    leaves the rest of the block intact. ``_`` imports and ``import "C"``
    are side effects; dot imports are wildcards.
    """

    language = "go"
    aliases = ("golang",)
    comment_prefixes = ("//", "/*", "*", "*/")
    import_keywords = ("import",)
    header_prefixes = ("package ",)
    patterns = {
        "single": r'^import\s+(?:([\w.]+)\s+)?"([^"]+)"\s*(?://.*)?$',
        "block_open": r"^import\s*\(\s*(?://.*)?$",
        "spec": r'^(?:([\w.]+)\s+)?"([^"]+)"\s*;?\s*(?://.*)?$',
    }

    def match_statement(self, lines, i, end):
        trimmed = lines[i].strip()

        m = self.compiled["single"].match(trimmed)
        if m:
            return [self._spec(lines, i, m.group(1), m.group(2), "single")], 1

        if not self.compiled["block_open"].match(trimmed):
            return [], 0

        statements = []
        j = i + 1
        while j < end:
            inner = lines[j].strip()
            if inner.startswith(")"):
                return statements, j - i + 1
            if inner and not inner.startswith(self.comment_prefixes):
                spec = self.compiled["spec"].match(inner)
                if spec:
                    statements.append(self._spec(lines, j, spec.group(1), spec.group(2), "block"))
            j += 1

        # Unterminated block: leave it alone
        return [], 0

    def _spec(self, lines, i, alias, path, form):
        alias = alias or ""
        named = bool(alias) and alias not in ("_", ".")
        return self.statement(
            lines,
            i,
            i,
            module=path,
            imported_names=[path] if named else [],
            aliases={path: alias} if named else {},
            is_side_effect=alias == "_" or path == "C",
            is_wildcard=alias == ".",
            form=form,
        )

    def default_names(self, module):
        if module in SPECIAL_PACKAGE_NAMES:
            return [SPECIAL_PACKAGE_NAMES[module]]

        parts = [p for p in module.split("/") if p]
        if not parts:
            return []
        last = parts[-1]
        # k8s.io/api/core/v1 is package v1; redis/v8 is package redis
        version = ""
        if _VERSION_SEGMENT_RE.match(last) and len(parts) > 1:
            version = last
            last = parts[-2]
        last = _VERSION_SUFFIX_RE.sub("", last)

        names = [last]
        if last.startswith("go-"):
            names.append(last[3:])
        if last.endswith("-go"):
            names.append(last[:-3])
        if "-" in last:
            names.append(last.replace("-", "_"))
        if version:
            names.append(version)
        return names
