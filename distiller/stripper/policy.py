"""Stripping policy — which parts of a tree get removed.

The four flags are independent and freely combinable. They can come from
CLI option strings (``--strip non-public,comments``) or a YAML file.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from distiller.errors import ConfigError

# Option string -> policy attribute
OPTION_NAMES = {
    "non-public": "remove_private",
    "private": "remove_private",
    "implementation": "remove_implementation",
    "comments": "remove_comments",
    "imports": "remove_imports",
}


@dataclass(frozen=True)
class StripPolicy:
    """What the stripper removes."""

    remove_private: bool = False
    remove_implementation: bool = False
    remove_comments: bool = False
    remove_imports: bool = False

    @property
    def is_empty(self) -> bool:
        return not any(
            (
                self.remove_private,
                self.remove_implementation,
                self.remove_comments,
                self.remove_imports,
            )
        )

    def flags(self) -> list[str]:
        """The canonical option strings enabled in this policy."""
        names = []
        if self.remove_private:
            names.append("non-public")
        if self.remove_implementation:
            names.append("implementation")
        if self.remove_comments:
            names.append("comments")
        if self.remove_imports:
            names.append("imports")
        return names

    @classmethod
    def from_strings(cls, options: list[str] | tuple[str, ...]) -> StripPolicy:
        """Build a policy from option strings; unknown names raise ValueError."""
        enabled = {}
        for option in options:
            for part in option.split(","):
                part = part.strip().lower()
                if not part:
                    continue
                if part not in OPTION_NAMES:
                    raise ValueError(
                        f"Unknown strip option '{part}' "
                        f"(expected one of: {', '.join(sorted(OPTION_NAMES))})"
                    )
                enabled[OPTION_NAMES[part]] = True
        return cls(**enabled)


def load_policy(path: str | Path) -> StripPolicy:
    """Load a policy from a YAML file with a ``strip:`` list."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")

    strip = data.get("strip", [])
    if isinstance(strip, str):
        strip = [strip]
    try:
        return StripPolicy.from_strings(strip)
    except ValueError as e:
        raise ConfigError(f"{path}: {e}") from e
