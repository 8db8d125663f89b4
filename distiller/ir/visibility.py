"""Default visibility classification.

Backends call :func:`classify_visibility` exactly once per declaration, while
building the tree. The stripper treats the result as data and never
re-derives it.
"""

from __future__ import annotations

from distiller.ir.models import Visibility

_KEYWORDS: dict[str, Visibility] = {
    "public": Visibility.PUBLIC,
    "open": Visibility.PUBLIC,
    "pub": Visibility.PUBLIC,
    "export": Visibility.PUBLIC,
    "protected": Visibility.PROTECTED,
    "private": Visibility.PRIVATE,
    "fileprivate": Visibility.PRIVATE,
    "internal": Visibility.INTERNAL,
    "package": Visibility.INTERNAL,
    "pub(crate)": Visibility.INTERNAL,
    "pub(super)": Visibility.INTERNAL,
    "protected internal": Visibility.PROTECTED,
    "private protected": Visibility.PRIVATE,
}

# Visibility of a declaration that carries no keyword, per language.
# Languages absent here use a naming convention (see classify_visibility).
_IMPLICIT: dict[str, Visibility] = {
    "java": Visibility.INTERNAL,  # package-private
    "csharp": Visibility.PRIVATE,  # members; top-level types are handled below
    "kotlin": Visibility.PUBLIC,
    "swift": Visibility.INTERNAL,
    "rust": Visibility.PRIVATE,
    "typescript": Visibility.PUBLIC,
    "javascript": Visibility.PUBLIC,
    "php": Visibility.PUBLIC,
    "ruby": Visibility.PUBLIC,
    "c": Visibility.PUBLIC,
}

CASE_CONVENTION_LANGUAGES = frozenset({"go"})
UNDERSCORE_CONVENTION_LANGUAGES = frozenset({"python"})


def keyword_visibility(keyword: str) -> Visibility | None:
    """Map an explicit access keyword to a visibility, or None if unknown."""
    return _KEYWORDS.get(" ".join(keyword.split()).lower())


def classify_visibility(
    language: str,
    name: str,
    keywords: tuple[str, ...] | list[str] = (),
    container: str = "",
) -> Visibility:
    """Derive the visibility of a declaration.

    Args:
        language: Language tag of the file being parsed.
        name: Bare identifier of the declaration.
        keywords: Access keywords written on the declaration, if any.
        container: Kind of the enclosing declaration ("class", "struct",
            "interface", ...) or "" at top level. Only consulted for
            languages whose default depends on it.
    """
    language = language.lower()

    # Python has no access keywords; the name decides
    if language in UNDERSCORE_CONVENTION_LANGUAGES:
        return _python_visibility(name)

    for keyword in keywords:
        visibility = keyword_visibility(keyword)
        if visibility is not None:
            return visibility

    if language in CASE_CONVENTION_LANGUAGES:
        return Visibility.PUBLIC if name[:1].isupper() else Visibility.PRIVATE

    if language in ("typescript", "javascript") and name.startswith("#"):
        return Visibility.PRIVATE

    if language == "cpp":
        return Visibility.PRIVATE if container == "class" else Visibility.PUBLIC

    if language == "csharp":
        if container == "interface":
            return Visibility.PUBLIC
        return Visibility.PRIVATE if container else Visibility.INTERNAL

    if language == "java" and container == "interface":
        return Visibility.PUBLIC

    return _IMPLICIT.get(language, Visibility.UNSPECIFIED)


def _python_visibility(name: str) -> Visibility:
    if name.startswith("__") and name.endswith("__"):
        return Visibility.PUBLIC
    if name.startswith("__"):
        return Visibility.PRIVATE
    if name.startswith("_"):
        return Visibility.PROTECTED
    return Visibility.PUBLIC
