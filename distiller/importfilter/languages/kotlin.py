"""Kotlin import filter."""

from __future__ import annotations

from distiller.importfilter.base import ImportFilter


class KotlinImportFilter(ImportFilter):
    """``import a.b.C``, ``import a.b.C as D`` and ``import a.b.*``.

    Top-level functions import the same way as classes, so the bound name
    is always the alias or the last segment.
    """

    language = "kotlin"
    aliases = ("kt", "kts")
    comment_prefixes = ("//", "/*", "*", "*/")
    import_keywords = ("import",)
    header_prefixes = ("package ", "@file:")
    patterns = {
        "import": r"^import\s+([\w.`]+?)(\.\*)?(?:\s+as\s+(\w+))?\s*;?\s*(?://.*)?$",
    }

    def match_statement(self, lines, i, end):
        m = self.compiled["import"].match(lines[i].strip())
        if not m:
            return [], 0

        module, star, alias = m.groups()
        module = module.replace("`", "")
        if star:
            return [self.statement(lines, i, i, module=module, is_wildcard=True, form="import")], 1
        if alias:
            stmt = self.statement(
                lines, i, i, module=module, imported_names=[module], aliases={module: alias}, form="import"
            )
        else:
            stmt = self.statement(lines, i, i, module=module, form="import")
        return [stmt], 1
