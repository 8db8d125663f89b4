"""Shared toolkit and the generic engine behind every language import filter.

A language filter is a small declarative subclass of :class:`ImportFilter`:
its pattern set, the prefixes that may sit inside an import section, a
statement matcher, the rule for deriving bound names from a module path, and
an optional table of well-known members for umbrella imports. The engine does
the rest:

1. split the input into ``<file path=...>`` blocks (or treat it as one unit)
2. parse the import section at the top of each block into ``ImportStatement``s
3. keep side-effect and wildcard imports unconditionally
4. keep any import whose bound name (or table entry) appears after the
   block's last import line
5. queue the rest as line ranges and delete them in descending order

The analyzer is biased toward false negatives: when in doubt, keep.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import ClassVar

from distiller.errors import FilterError
from distiller.importfilter.models import FilterResult, ImportStatement

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("#", "//", "/*", "*", "*/")

_FILE_OPEN_RE = re.compile(r"^\s*<file\s+path=")
_FILE_CLOSE_RE = re.compile(r"^\s*</file>")
_PATH_SPLIT_RE = re.compile(r"[./\\:]+")


# --- Toolkit ---


def is_comment_line(line: str, prefixes: tuple[str, ...] = COMMENT_PREFIXES) -> bool:
    """Heuristic: does *line* look like a comment?"""
    trimmed = line.strip()
    return bool(trimmed) and trimmed.startswith(prefixes)


@lru_cache(maxsize=2048)
def usage_pattern(name: str) -> re.Pattern[str]:
    """Regex that finds *name* as a whole word.

    Word boundaries are only added on sides where the name itself starts or
    ends with a word character, so table entries such as ``List<`` or
    ``.Where(`` work as plain substrings on their punctuation side.
    """
    head = r"\b" if _is_word_char(name[0]) else ""
    tail = r"\b" if _is_word_char(name[-1]) else ""
    return re.compile(head + re.escape(name) + tail)


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def search_for_usage(
    lines: list[str], name: str, after_line: int, end_line: int | None = None
) -> bool:
    """Is *name* referenced on any line strictly after *after_line*?

    ``after_line`` is the 1-based number of the last import line; ``end_line``
    (1-based, inclusive) bounds the search to one compilation unit. Comment
    lines are searched too.
    """
    if not name:
        return False
    pattern = usage_pattern(name)
    stop = len(lines) if end_line is None else min(end_line, len(lines))
    return any(pattern.search(line) for line in lines[after_line:stop])


def remove_line_ranges(lines: list[str], ranges: list[tuple[int, int]]) -> list[str]:
    """Delete 1-based inclusive line ranges, last range first."""
    result = list(lines)
    for start, end in sorted(ranges, reverse=True):
        if start < 1 or end > len(result) or start > end:
            continue
        del result[start - 1 : end]
    return result


def file_blocks(lines: list[str]) -> list[tuple[int, int]]:
    """0-based ``[start, end)`` ranges of each ``<file>`` block's content.

    Input without file markers is one block spanning every line.
    """
    blocks = []
    start = None
    seen_marker = False
    for i, line in enumerate(lines):
        if _FILE_OPEN_RE.match(line):
            seen_marker = True
            start = i + 1
        elif _FILE_CLOSE_RE.match(line) and start is not None:
            blocks.append((start, i))
            start = None
    if start is not None:
        blocks.append((start, len(lines)))
    if not seen_marker:
        return [(0, len(lines))]
    return blocks


def has_trailing_statement(logical: str) -> bool:
    """Does another statement follow a ``;`` on this logical line?

    ``from a import b; import c`` is one line holding two statements; the
    caller treats it as unparsable so the line is left untouched.
    """
    return ";" in logical.rstrip().rstrip(";")


def split_path(module: str) -> list[str]:
    return [part for part in _PATH_SPLIT_RE.split(module) if part]


# --- Engine ---


class ImportFilter(ABC):
    """Generic unused-import remover, specialized by class attributes."""

    language: ClassVar[str] = ""
    aliases: ClassVar[tuple[str, ...]] = ()

    # Leading tokens of comment lines in this language
    comment_prefixes: ClassVar[tuple[str, ...]] = COMMENT_PREFIXES
    # Words that start an import-like line; unparsable ones are skipped, not guessed at
    import_keywords: ClassVar[tuple[str, ...]] = ()
    # Non-import lines allowed inside the import section (package clauses etc.)
    header_prefixes: ClassVar[tuple[str, ...]] = ()
    # Statement patterns, compiled once per instance
    patterns: ClassVar[dict[str, str]] = {}
    # Umbrella module -> names or call patterns that count as usage
    usage_table: ClassVar[dict[str, tuple[str, ...]]] = {}

    def __init__(self) -> None:
        self.compiled: dict[str, re.Pattern[str]] = {}
        self.broken = ""
        try:
            self.compiled = {key: re.compile(p) for key, p in self.patterns.items()}
            if self.import_keywords:
                alternatives = "|".join(re.escape(k) for k in self.import_keywords)
                self._keyword_re: re.Pattern[str] | None = re.compile(rf"^(?:{alternatives})\b")
            else:
                self._keyword_re = None
        except re.error as e:
            self.compiled = {}
            self._keyword_re = None
            self.broken = f"invalid pattern set: {e}"
            logger.warning("[%s import filter] %s", self.language, self.broken)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def filter_unused_imports(self, code: str, verbosity: int = 0) -> FilterResult:
        """Remove unused imports from *code*.

        Never raises: any internal fault returns the input unchanged with
        ``FilterResult.error`` set.
        """
        self._debug(verbosity, 1, "Starting import filtering (%d bytes)", len(code))
        if self.broken:
            return FilterResult(code=code, error=self.broken, language=self.language)

        lines = code.split("\n")
        try:
            ranges, removed = self._collect_unused(lines, verbosity)
        except Exception as e:  # plugin faults degrade to pass-through
            error = FilterError(self.language, str(e))
            logger.warning("%s", error)
            return FilterResult(code=code, error=str(error), language=self.language)

        if not ranges:
            self._debug(verbosity, 1, "No unused imports found")
            return FilterResult(code=code, language=self.language)

        filtered = "\n".join(remove_line_ranges(lines, ranges))
        self._debug(verbosity, 1, "Removed %d unused imports", len(removed))
        return FilterResult(code=filtered, removed=removed, language=self.language)

    def _collect_unused(
        self, lines: list[str], verbosity: int
    ) -> tuple[list[tuple[int, int]], list[str]]:
        ranges: list[tuple[int, int]] = []
        removed: list[str] = []

        for start, end in file_blocks(lines):
            imports = self.parse_imports(lines, start, end)
            if not imports:
                continue
            self._debug(verbosity, 2, "Found %d import statements", len(imports))

            last_import_line = max(imp.end_line for imp in imports)
            for imp in imports:
                if self.is_retained(imp):
                    self._debug(verbosity, 3, "Keeping side-effect/wildcard import: %s", imp.text)
                    continue
                if self.is_used(imp, lines, last_import_line, end, start):
                    self._debug(verbosity, 3, "Keeping used import: %s", imp.text)
                    continue
                self._debug(verbosity, 2, "Removing unused import: %s", imp.text)
                removed.append(imp.text)
                ranges.append((imp.start_line, imp.end_line))

        return ranges, removed

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse_imports(self, lines: list[str], start: int, end: int) -> list[ImportStatement]:
        """Parse the import section that opens ``lines[start:end]``.

        The section ends at the first line that is neither blank, a comment,
        an import, nor language-specific header material.
        """
        imports: list[ImportStatement] = []
        i = start
        while i < end:
            trimmed = lines[i].strip()
            if not trimmed or trimmed.startswith(self.comment_prefixes):
                i += 1
                continue

            statements, consumed = self.match_statement(lines, i, end)
            if consumed:
                imports.extend(statements)
                i += consumed
                continue

            skipped = self.skip_header(lines, i, end)
            if skipped:
                i += skipped
                continue

            if self._keyword_re is not None and self._keyword_re.match(trimmed):
                # Import-looking but unparsable: leave it alone
                i += 1
                continue
            break
        return imports

    @abstractmethod
    def match_statement(
        self, lines: list[str], i: int, end: int
    ) -> tuple[list[ImportStatement], int]:
        """Recognize an import statement starting at ``lines[i]``.

        Returns the statements found and the number of lines consumed
        (0 when the line is not an import).
        """

    def skip_header(self, lines: list[str], i: int, end: int) -> int:
        """Number of header (non-import) lines to step over at ``lines[i]``."""
        return 1 if lines[i].strip().startswith(self.header_prefixes) else 0

    def statement(self, lines: list[str], first: int, last: int, **fields) -> ImportStatement:
        """Build a statement for 0-based line indices ``first..last``."""
        return ImportStatement(
            start_line=first + 1,
            end_line=last + 1,
            text="\n".join(lines[first : last + 1]),
            **fields,
        )

    @staticmethod
    def find_closing(lines: list[str], i: int, end: int, closer: str) -> int | None:
        """Index of the first line at or after *i* containing *closer*."""
        for j in range(i, end):
            if closer in lines[j]:
                return j
        return None

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def is_retained(self, imp: ImportStatement) -> bool:
        return imp.is_side_effect or imp.is_wildcard

    def is_used(
        self, imp: ImportStatement, lines: list[str], after: int, end: int, start: int = 0
    ) -> bool:
        """Is any bound name or table entry referenced after the import section?

        ``start`` is the 0-based first line of the enclosing block.
        """
        names = self.bound_names(imp)
        for name in names:
            if search_for_usage(lines, name, after, end):
                return True

        table = self.aggregate_patterns(imp)
        for pattern in table:
            if search_for_usage(lines, pattern, after, end):
                return True

        # Nothing we could check means nothing we could disprove
        return not names and not table

    def bound_names(self, imp: ImportStatement) -> list[str]:
        """Names the import binds locally: aliases, declared names, or a default."""
        names = [imp.aliases.get(name) or name for name in imp.imported_names]
        names += [
            alias
            for name, alias in imp.aliases.items()
            if alias and name not in imp.imported_names
        ]
        if not names:
            names = self.default_names(imp.module)
        return list(dict.fromkeys(n for n in names if n))

    def default_names(self, module: str) -> list[str]:
        parts = split_path(module)
        return parts[-1:]

    def aggregate_patterns(self, imp: ImportStatement) -> tuple[str, ...]:
        return self.usage_table.get(imp.module, ())

    # ------------------------------------------------------------------

    def _debug(self, verbosity: int, level: int, message: str, *args) -> None:
        if verbosity >= level:
            logger.debug("[%s import filter] " + message, self.language, *args)
