"""Pytest fixtures for refmirror tests.

This module provides reusable fixtures for testing refmirror components,
including seeded source repositories, empty destinations, and a clean
configuration environment.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Generator

import pytest


def _configure_path() -> None:
    """Configure sys.path to prioritize the src directory."""
    src_path = str(Path(__file__).parent.parent / "src")
    if src_path in sys.path:
        sys.path.remove(src_path)
    sys.path.insert(0, src_path)


_configure_path()

from refmirror.config import reset_config  # noqa: E402
from refmirror.config.env import (  # noqa: E402
    ENV_GITHUB_REPOSITORY,
    ENV_GITHUB_SERVER_URL,
    get_env_var_docs,
)
from refmirror.utils.repo import new_bare_repo, new_test_repo  # noqa: E402


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Remove refmirror and GitHub Actions variables and reset cached config."""
    for name in list(get_env_var_docs()) + [ENV_GITHUB_SERVER_URL, ENV_GITHUB_REPOSITORY]:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def source_repo(tmp_path: Path) -> tuple[Path, str]:
    """Create a source repository with a few refs on one commit.

    Refs created:
    - refs/heads/master (with HEAD pointing at it)
    - refs/heads/foo
    - refs/tags/v1.0
    - refs/pull/1/head (read-only on hosting services)

    Returns:
        Tuple of (repository path, commit id).
    """
    path = tmp_path / "source"
    path.mkdir()
    repo, commit = new_test_repo(
        path,
        ["refs/heads/foo", "refs/tags/v1.0", "refs/pull/1/head"],
    )
    repo.close()
    return path, commit


@pytest.fixture
def empty_destination(tmp_path: Path) -> Path:
    """Create an empty bare repository to mirror into."""
    path = tmp_path / "destination.git"
    path.mkdir()
    new_bare_repo(path).close()
    return path
