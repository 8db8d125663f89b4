"""Error taxonomy shared by the backends, the import filters and the processor.

Parse errors are not exceptions: backends record them as ``ParseError``
entries and ``IRErrorMarker`` nodes inside a partial tree.
"""

from __future__ import annotations


class DistillerError(Exception):
    """Base class for all distiller errors."""


class UnsupportedLanguageError(DistillerError):
    """No backend or import filter is registered for a language."""

    def __init__(self, language: str | None, path: str = ""):
        self.language = language
        self.path = path
        where = f" for {path}" if path else ""
        super().__init__(f"Unsupported language{where}: {language or 'unknown'}")


class BackendUnavailableError(DistillerError):
    """A backend is registered but cannot run in this build."""

    def __init__(self, language: str, reason: str):
        self.language = language
        self.reason = reason
        super().__init__(f"Backend for {language} is unavailable: {reason}")


class FilterError(DistillerError):
    """Internal fault inside a language import filter."""

    def __init__(self, language: str, message: str):
        self.language = language
        super().__init__(f"[{language} import filter] {message}")


class ConfigError(DistillerError):
    """Invalid configuration file or option value."""
