"""Tests for refmirror custom exception hierarchy.

This module verifies that each exception can be raised, caught, and
provides proper error context.
"""

from __future__ import annotations

import pytest

from refmirror.core.exceptions import (
    ConfigError,
    MirrorError,
    RefMirrorError,
    RepositoryError,
)


class TestRefMirrorError:
    """Tests for the base RefMirrorError exception."""

    def test_message_attribute(self) -> None:
        error = RefMirrorError("Test message")
        assert error.message == "Test message"

    def test_context_attribute_default(self) -> None:
        assert RefMirrorError("Test").context == {}

    def test_str_without_context(self) -> None:
        assert str(RefMirrorError("Test error message")) == "Test error message"

    def test_str_with_context(self) -> None:
        result = str(RefMirrorError("Test error", context={"key": "value"}))
        assert "Test error" in result
        assert "key='value'" in result

    def test_inherits_from_exception(self) -> None:
        assert isinstance(RefMirrorError("Test"), Exception)


class TestConfigError:
    """Tests for the ConfigError exception."""

    def test_config_key(self) -> None:
        error = ConfigError("Missing", config_key="destination")
        assert error.config_key == "destination"
        assert error.context["config_key"] == "destination"

    def test_caught_as_base(self) -> None:
        with pytest.raises(RefMirrorError):
            raise ConfigError("Invalid")


class TestRepositoryError:
    """Tests for the RepositoryError exception."""

    def test_path(self) -> None:
        error = RepositoryError("Not a git repository", path="/tmp/x")
        assert error.path == "/tmp/x"
        assert "path='/tmp/x'" in str(error)

    def test_without_path(self) -> None:
        error = RepositoryError("Broken")
        assert error.path is None
        assert error.context == {}


class TestMirrorError:
    """Tests for the MirrorError exception."""

    def test_remote_and_context(self) -> None:
        error = MirrorError("Push rejected", remote="git@host:a/b.git", context={"rejected": {"refs/heads/x": "ng"}})
        assert error.remote == "git@host:a/b.git"
        assert error.context["remote"] == "git@host:a/b.git"
        assert error.context["rejected"] == {"refs/heads/x": "ng"}

    def test_caught_as_base(self) -> None:
        with pytest.raises(RefMirrorError):
            raise MirrorError("Fetch failed")
