"""Import analyzer data models.

``ImportStatement`` is the text-side record of an import. It is deliberately
separate from ``IRImport``: the analyzer runs on raw or rendered text whether
or not a tree exists for the language.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ImportStatement:
    """One import statement found in text.

    Line numbers are 1-based and inclusive, counted over the whole input
    even when it holds several ``<file>`` blocks.
    """

    start_line: int
    end_line: int
    text: str = ""  # Exact original line(s)
    module: str = ""
    imported_names: list[str] = field(default_factory=list)
    aliases: dict[str, str] = field(default_factory=dict)  # name -> alias, "" = none
    is_wildcard: bool = False
    is_side_effect: bool = False
    form: str = ""  # Language-specific statement form, e.g. "static", "require"

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1


@dataclass
class FilterResult:
    """Outcome of one analyzer run."""

    code: str
    removed: list[str] = field(default_factory=list)
    error: str | None = None
    language: str = ""

    @property
    def changed(self) -> bool:
        return bool(self.removed)

    def summary(self) -> str:
        if self.error:
            return f"[{self.language}] unchanged ({self.error})"
        return f"[{self.language}] removed {len(self.removed)} unused import(s)"
