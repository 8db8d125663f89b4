"""PHP import filter."""

from __future__ import annotations

from distiller.importfilter.base import ImportFilter


class PhpImportFilter(ImportFilter):
    """``use`` statements for classes, functions and constants.

    Handles aliases, comma lists and grouped ``use A\\{B, C as D};`` spread
    over several lines. A statement is one removal unit: a group with any
    used member is kept whole. ``require``/``include`` lines run code and are
    side effects.
    """

    language = "php"
    comment_prefixes = ("//", "/*", "*", "*/", "#")
    import_keywords = ("use", "require", "require_once", "include", "include_once")
    header_prefixes = ("<?php", "<?", "namespace ", "namespace{", "declare(", "declare (")
    patterns = {
        "use": r"^use\s+(?:(function|const)\s+)?(.+?)\s*;\s*(?://.*|#.*)?$",
        "group": r"^([\w\\]*?)\\?\s*\{(.*)\}$",
        "include": r"^(?:require|require_once|include|include_once)\b.*;\s*(?://.*|#.*)?$",
    }

    def match_statement(self, lines, i, end):
        trimmed = lines[i].strip()

        m = self.compiled["include"].match(trimmed)
        if m:
            return [self.statement(lines, i, i, module=trimmed, is_side_effect=True, form="include")], 1

        if not trimmed.startswith("use ") and not trimmed.startswith("use\t"):
            return [], 0

        last = i
        logical = trimmed
        if "{" in logical and "}" not in logical:
            close = self.find_closing(lines, i + 1, end, "}")
            if close is None:
                return [], 0
            last = close
            logical = " ".join(line.strip() for line in lines[i : close + 1])

        m = self.compiled["use"].match(logical)
        if not m:
            return [], 0
        kind, body = m.groups()

        group = self.compiled["group"].match(body.strip())
        if group:
            prefix = group.group(1)
            items = [f"{prefix}\\{item}" for item in self._split_items(group.group(2))]
            module = prefix
        else:
            items = self._split_items(body)
            module = items[0].split(" as ")[0] if items else body

        names, aliases = [], {}
        for item in items:
            path, _, alias = item.partition(" as ")
            name = path.strip().rstrip("\\").split("\\")[-1]
            names.append(name)
            if alias.strip():
                aliases[name] = alias.strip()

        stmt = self.statement(
            lines,
            i,
            last,
            module=module.lstrip("\\"),
            imported_names=names,
            aliases=aliases,
            form=kind or ("group" if group else "use"),
        )
        return [stmt], last - i + 1

    @staticmethod
    def _split_items(text):
        return [" ".join(item.split()) for item in text.split(",") if item.strip()]
