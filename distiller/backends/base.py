"""Parser backend contract and registry.

A backend turns the bytes of one source file into an ``IRFile``. On a
syntax error it must still return a partial tree, with ``ParseError``
entries and ``IRErrorMarker`` nodes marking what could not be read.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from distiller.errors import BackendUnavailableError, UnsupportedLanguageError
from distiller.ir.models import IRFile
from distiller.utils.file_scanner import classify_file

logger = logging.getLogger(__name__)


class ParserBackend(ABC):
    """Builds IR trees for one language."""

    language: ClassVar[str] = ""
    extensions: ClassVar[tuple[str, ...]] = ()

    @abstractmethod
    def process(self, source: bytes, filename: str) -> IRFile:
        """Parse *source* into a (possibly partial) tree."""

    def available(self) -> str | None:
        """Return a reason string if this backend cannot run here, else None."""
        return None


class BackendRegistry:
    """Maps language tags to backends."""

    def __init__(self):
        self._backends: dict[str, ParserBackend] = {}
        self._lock = threading.Lock()

    def register(self, backend: ParserBackend) -> None:
        with self._lock:
            self._backends[backend.language] = backend

    def get(self, language: str | None, path: str = "") -> ParserBackend:
        backend = self._backends.get((language or "").lower())
        if backend is None:
            raise UnsupportedLanguageError(language, path)
        reason = backend.available()
        if reason:
            raise BackendUnavailableError(backend.language, reason)
        return backend

    def for_path(self, path: str | Path) -> ParserBackend:
        path = Path(path)
        return self.get(classify_file(path), str(path))

    def languages(self) -> list[str]:
        return sorted(self._backends)

    def __contains__(self, language: str) -> bool:
        return language in self._backends


_default: BackendRegistry | None = None
_default_lock = threading.Lock()


def default_backends() -> BackendRegistry:
    """The process-wide registry with the built-in backends, built once."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                from distiller.backends.python_backend import PythonBackend

                registry = BackendRegistry()
                registry.register(PythonBackend())
                logger.debug("Registered backends: %s", ", ".join(registry.languages()))
                _default = registry
    return _default
