"""Unused-import analysis — heuristic, text-level, one filter per language."""

from distiller.importfilter.base import ImportFilter, search_for_usage
from distiller.importfilter.models import FilterResult, ImportStatement
from distiller.importfilter.registry import (
    FilterRegistry,
    default_registry,
    filter_imports,
    get_filter,
    register,
)

__all__ = [
    "FilterRegistry",
    "FilterResult",
    "ImportFilter",
    "ImportStatement",
    "default_registry",
    "filter_imports",
    "get_filter",
    "register",
    "search_for_usage",
]
