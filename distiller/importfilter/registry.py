"""Import filter registry — language tag to filter lookup.

An explicit ``FilterRegistry`` can be built and passed around by the caller.
For convenience there is also a process-wide default registry, populated
with the built-in filters on first use under a lock. After that it is only
read, so lookups need no synchronization.
"""

from __future__ import annotations

import logging
import threading

from distiller.errors import UnsupportedLanguageError
from distiller.importfilter.base import ImportFilter
from distiller.importfilter.models import FilterResult

logger = logging.getLogger(__name__)


class FilterRegistry:
    """Maps language tags (and their aliases) to filter instances."""

    def __init__(self):
        self._filters: dict[str, ImportFilter] = {}
        self._lock = threading.Lock()

    def register(self, language: str, impl: ImportFilter) -> None:
        with self._lock:
            self._filters[language.lower()] = impl

    def register_filter(self, impl: ImportFilter) -> None:
        """Register *impl* under its own language tag and all of its aliases."""
        for tag in (impl.language, *impl.aliases):
            self.register(tag, impl)

    def get_filter(self, language: str) -> ImportFilter:
        impl = self._filters.get((language or "").lower())
        if impl is None:
            raise UnsupportedLanguageError(language)
        return impl

    def languages(self) -> list[str]:
        """Primary language tags, without aliases."""
        return sorted({impl.language for impl in self._filters.values()})

    def __contains__(self, language: str) -> bool:
        return (language or "").lower() in self._filters

    def filter_imports(self, code: str, language: str, verbosity: int = 0) -> FilterResult:
        """Run the filter for *language*; unknown languages pass through unchanged."""
        try:
            impl = self.get_filter(language)
        except UnsupportedLanguageError:
            logger.debug("No import filter for %s, leaving code unchanged", language)
            return FilterResult(code=code, language=language)
        return impl.filter_unused_imports(code, verbosity)


def build_default_registry() -> FilterRegistry:
    from distiller.importfilter.languages import BUILTIN_FILTERS

    registry = FilterRegistry()
    for filter_cls in BUILTIN_FILTERS:
        registry.register_filter(filter_cls())
    return registry


# --- Process-wide default ---

_default: FilterRegistry | None = None
_default_lock = threading.Lock()


def default_registry() -> FilterRegistry:
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = build_default_registry()
    return _default


def register(language: str, impl: ImportFilter) -> None:
    default_registry().register(language, impl)


def get_filter(language: str) -> ImportFilter:
    return default_registry().get_filter(language)


def filter_imports(
    code: str, language: str, verbosity: int = 0, registry: FilterRegistry | None = None
) -> FilterResult:
    """Remove unused imports from *code* using the filter for *language*."""
    return (registry or default_registry()).filter_imports(code, language, verbosity)
