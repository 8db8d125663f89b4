"""Rust import filter."""

from __future__ import annotations

import re

from distiller.importfilter.base import ImportFilter

# Traits are used through method syntax, so their names rarely appear
RUST_TRAITS = frozenset(
    {
        "Read",
        "Write",
        "BufRead",
        "Seek",
        "FromStr",
        "Hash",
        "Hasher",
        "Iterator",
        "IntoIterator",
        "FromIterator",
        "Borrow",
        "BorrowMut",
        "Deref",
        "DerefMut",
        "TryFrom",
        "TryInto",
        "Future",
        "Stream",
        "Rng",
        "Digest",
    }
)

_MOD_DECL_RE = re.compile(r"^(?:pub(?:\([^)]*\))?\s+)?mod\s+\w+\s*;$")


class RustImportFilter(ImportFilter):
    """``use`` trees and ``extern crate``.

    Brace groups may nest and span lines; the whole statement is one removal
    unit. ``pub use`` is a re-export and always kept, as are glob imports,
    ``as _`` imports, and imports of well-known traits.
    """

    language = "rust"
    aliases = ("rs",)
    comment_prefixes = ("//", "/*", "*", "*/")
    import_keywords = ("use", "pub use", "extern crate")
    header_prefixes = ("#[", "#![")
    patterns = {
        "use": r"^(pub(?:\([^)]*\))?\s+)?use\s+(.+?)\s*;\s*(?://.*)?$",
        "extern": r"^extern\s+crate\s+(\w+)(?:\s+as\s+(\w+))?\s*;\s*(?://.*)?$",
    }

    def match_statement(self, lines, i, end):
        trimmed = lines[i].strip()

        m = self.compiled["extern"].match(trimmed)
        if m:
            crate, alias = m.groups()
            stmt = self.statement(
                lines,
                i,
                i,
                module=crate,
                imported_names=[crate],
                aliases={crate: alias} if alias else {},
                is_side_effect=alias == "_",
                form="extern",
            )
            return [stmt], 1

        if not re.match(r"^(?:pub(?:\([^)]*\))?\s+)?use\s", trimmed):
            return [], 0

        last = i
        logical = trimmed
        if ";" not in logical:
            close = self.find_closing(lines, i + 1, end, ";")
            if close is None:
                return [], 0
            last = close
            logical = " ".join(line.strip() for line in lines[i : close + 1])

        m = self.compiled["use"].match(logical)
        if not m:
            return [], 0
        visibility, tree = m.groups()

        leaves = list(self._leaves(_normalize(tree)))
        names, aliases = [], {}
        wildcard = side_effect = bool(visibility)
        for path, alias in leaves:
            segment = path.rsplit("::", 1)[-1]
            if segment == "*":
                wildcard = True
                continue
            if alias == "_" or (not alias and segment in RUST_TRAITS) or segment.endswith("Ext"):
                side_effect = True
                continue
            names.append(segment)
            if alias:
                aliases[segment] = alias

        stmt = self.statement(
            lines,
            i,
            last,
            module=tree.split("::{")[0].strip(),
            imported_names=names,
            aliases=aliases,
            is_wildcard=wildcard,
            is_side_effect=side_effect,
            form="pub use" if visibility else "use",
        )
        return [stmt], last - i + 1

    def _leaves(self, tree, prefix=""):
        """Yield ``(path, alias)`` for every leaf of a use tree."""
        brace = tree.find("{")
        if brace == -1:
            path, _, alias = tree.partition(" as ")
            path = path.strip()
            if path.endswith("::self") or path == "self":
                path = prefix.rstrip(":") if path == "self" else path[: -len("::self")]
            elif prefix:
                path = prefix + path
            yield path, alias.strip()
            return

        head = prefix + tree[:brace]
        inner = tree[brace + 1 : tree.rfind("}")]
        for part in _split_top_level(inner):
            yield from self._leaves(part, head)

    def skip_header(self, lines, i, end):
        trimmed = lines[i].strip()
        if trimmed.startswith(self.header_prefixes) or _MOD_DECL_RE.match(trimmed):
            return 1
        return 0


def _normalize(tree):
    tree = re.sub(r"\s+", " ", tree)
    return re.sub(r"\s*([:{},])\s*", r"\1", tree).strip()


def _split_top_level(text):
    parts, depth, current = [], 0, []
    for ch in text:
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]
