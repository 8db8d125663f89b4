"""Tests for strip policy parsing and loading."""

import tempfile
from pathlib import Path

import pytest

from distiller.errors import ConfigError
from distiller.stripper import StripPolicy, load_policy


def test_default_policy_is_empty():
    assert StripPolicy().is_empty
    assert StripPolicy().flags() == []


def test_from_strings_comma_separated():
    policy = StripPolicy.from_strings(["non-public,implementation"])
    assert policy.remove_private
    assert policy.remove_implementation
    assert not policy.remove_comments
    assert not policy.remove_imports


def test_from_strings_repeated_and_aliases():
    policy = StripPolicy.from_strings(["private", " Comments ", "imports,"])
    assert policy.flags() == ["non-public", "comments", "imports"]


def test_from_strings_rejects_unknown_option():
    with pytest.raises(ValueError, match="bodies"):
        StripPolicy.from_strings(["bodies"])


def test_policy_is_hashable_and_frozen():
    policy = StripPolicy(remove_comments=True)
    assert policy in {policy}
    with pytest.raises(AttributeError):
        policy.remove_comments = False


def test_load_policy_from_yaml():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "policy.yaml"
        path.write_text("strip:\n  - non-public\n  - implementation\n")
        policy = load_policy(path)
        assert policy == StripPolicy(remove_private=True, remove_implementation=True)


def test_load_policy_accepts_single_string():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "policy.yaml"
        path.write_text("strip: comments,imports\n")
        assert load_policy(path).flags() == ["comments", "imports"]


def test_load_policy_errors():
    with tempfile.TemporaryDirectory() as tmpdir:
        bad_option = Path(tmpdir) / "bad.yaml"
        bad_option.write_text("strip: [everything]\n")
        with pytest.raises(ConfigError, match="everything"):
            load_policy(bad_option)

        not_a_mapping = Path(tmpdir) / "list.yaml"
        not_a_mapping.write_text("- comments\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_policy(not_a_mapping)
