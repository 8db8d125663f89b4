"""Configuration file loading.

Settings come from ``.distiller.yaml`` in the working directory, or from an
explicit ``--config`` path. Command-line flags override file values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from distiller.errors import ConfigError
from distiller.processor import OUTPUT_FORMATS
from distiller.stripper.policy import StripPolicy

DEFAULT_CONFIG_FILE = ".distiller.yaml"

KNOWN_KEYS = {"strip", "filter_unused_imports", "format", "workers", "exclude"}


@dataclass
class Config:
    strip: list[str] = field(default_factory=list)
    filter_unused_imports: bool = False
    format: str = "text"
    workers: int = 1
    exclude: list[str] = field(default_factory=list)

    @property
    def policy(self) -> StripPolicy:
        return StripPolicy.from_strings(self.strip)


def load_config(path: str | Path | None = None) -> Config:
    """Load settings from *path*, or the default file if it exists.

    A missing default file yields the defaults; a missing explicit file is
    an error.
    """
    if path is None:
        path = Path(DEFAULT_CONFIG_FILE)
        if not path.exists():
            return Config()

    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")

    unknown = set(data) - KNOWN_KEYS
    if unknown:
        raise ConfigError(f"{path}: unknown keys: {', '.join(sorted(unknown))}")

    strip = data.get("strip", [])
    if isinstance(strip, str):
        strip = [strip]

    config = Config(
        strip=list(strip),
        filter_unused_imports=bool(data.get("filter_unused_imports", False)),
        format=data.get("format", "text"),
        workers=data.get("workers", 1),
        exclude=list(data.get("exclude", [])),
    )

    if config.format not in OUTPUT_FORMATS:
        raise ConfigError(f"{path}: format must be one of {', '.join(OUTPUT_FORMATS)}")
    if not isinstance(config.workers, int) or config.workers < 1:
        raise ConfigError(f"{path}: workers must be a positive integer")
    try:
        StripPolicy.from_strings(config.strip)
    except ValueError as e:
        raise ConfigError(f"{path}: {e}") from e
    return config
