"""Tests for default visibility classification."""

from distiller.ir.models import Visibility
from distiller.ir.visibility import classify_visibility, keyword_visibility


def test_keywords():
    assert keyword_visibility("public") == Visibility.PUBLIC
    assert keyword_visibility("Protected  Internal") == Visibility.PROTECTED
    assert keyword_visibility("pub(crate)") == Visibility.INTERNAL
    assert keyword_visibility("static") is None


def test_python_underscore_convention():
    assert classify_visibility("python", "run") == Visibility.PUBLIC
    assert classify_visibility("python", "__init__") == Visibility.PUBLIC
    assert classify_visibility("python", "_helper") == Visibility.PROTECTED
    assert classify_visibility("python", "__mangled") == Visibility.PRIVATE


def test_python_ignores_keywords():
    assert classify_visibility("python", "_x", ("public",)) == Visibility.PROTECTED


def test_go_case_convention():
    assert classify_visibility("go", "Handler") == Visibility.PUBLIC
    assert classify_visibility("go", "handler") == Visibility.PRIVATE


def test_explicit_keyword_wins():
    assert classify_visibility("java", "run", ("private",)) == Visibility.PRIVATE
    assert classify_visibility("rust", "f", ("pub",)) == Visibility.PUBLIC


def test_implicit_defaults_depend_on_container():
    assert classify_visibility("java", "run") == Visibility.INTERNAL
    assert classify_visibility("java", "run", container="interface") == Visibility.PUBLIC
    assert classify_visibility("csharp", "Widget") == Visibility.INTERNAL
    assert classify_visibility("csharp", "count", container="class") == Visibility.PRIVATE
    assert classify_visibility("csharp", "Run", container="interface") == Visibility.PUBLIC
    assert classify_visibility("cpp", "x", container="class") == Visibility.PRIVATE
    assert classify_visibility("cpp", "x", container="struct") == Visibility.PUBLIC
    assert classify_visibility("rust", "f") == Visibility.PRIVATE


def test_private_class_fields_in_javascript():
    assert classify_visibility("javascript", "#secret") == Visibility.PRIVATE
    assert classify_visibility("typescript", "render") == Visibility.PUBLIC


def test_unknown_language_is_unspecified():
    assert classify_visibility("cobol", "PARA-1") == Visibility.UNSPECIFIED
