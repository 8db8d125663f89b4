"""Java import filter."""

from __future__ import annotations

from distiller.importfilter.base import ImportFilter


class JavaImportFilter(ImportFilter):
    """``import a.b.C;``, ``import a.b.*;`` and ``import static a.b.C.member;``.

    A type import binds its last segment, a static member import binds the
    member. Both wildcard forms are kept.
    """

    language = "java"
    comment_prefixes = ("//", "/*", "*", "*/")
    import_keywords = ("import",)
    header_prefixes = ("package ", "@")
    patterns = {
        "static": r"^import\s+static\s+([\w.]+)\.(\w+|\*)\s*;?\s*(?://.*)?$",
        "type": r"^import\s+([\w.]+?)(\.\*)?\s*;?\s*(?://.*)?$",
    }

    def match_statement(self, lines, i, end):
        trimmed = lines[i].strip()

        m = self.compiled["static"].match(trimmed)
        if m:
            owner, member = m.groups()
            if member == "*":
                stmt = self.statement(lines, i, i, module=owner, is_wildcard=True, form="static")
            else:
                stmt = self.statement(lines, i, i, module=owner, imported_names=[member], form="static")
            return [stmt], 1

        m = self.compiled["type"].match(trimmed)
        if m:
            module, star = m.groups()
            return [self.statement(lines, i, i, module=module, is_wildcard=bool(star), form="import")], 1

        return [], 0
