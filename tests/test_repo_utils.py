"""Tests for the dulwich repository helpers.

This module tests repository creation, ref listing, ref hash checks and
the ref/refspec string conversions in refmirror.utils.repo.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from dulwich.repo import Repo

from refmirror.core.exceptions import RepositoryError
from refmirror.core.models import Ref, RefSpec
from refmirror.utils.repo import (
    new_bare_repo,
    new_test_repo,
    open_repo,
    refs_to_strings,
    repo_refs,
    repo_refs_check_hash,
    repo_refs_slice,
    specs_to_strings,
)
from refmirror.utils.slices import slices_are_equal


class TestNewBareRepo:
    """Tests for new_bare_repo."""

    def test_only_head(self, tmp_path: Path) -> None:
        """Test that a fresh bare repository only lists HEAD."""
        repo = new_bare_repo(tmp_path)
        try:
            assert slices_are_equal(repo_refs_slice(repo), ["HEAD"])
        finally:
            repo.close()

    def test_is_bare(self, tmp_path: Path) -> None:
        repo = new_bare_repo(tmp_path)
        try:
            assert repo.bare
        finally:
            repo.close()

    def test_head_is_symbolic_to_master(self, tmp_path: Path) -> None:
        repo = new_bare_repo(tmp_path)
        try:
            assert repo_refs(repo) == [Ref("HEAD", "refs/heads/master", symbolic=True)]
        finally:
            repo.close()

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(RepositoryError) as exc_info:
            new_bare_repo(tmp_path / "missing")
        assert exc_info.value.path == str(tmp_path / "missing")


class TestNewTestRepo:
    """Tests for new_test_repo."""

    def test_refs(self, tmp_path: Path) -> None:
        """Test that HEAD, master and the requested refs exist."""
        repo, _ = new_test_repo(tmp_path, ["refs/heads/foo", "refs/meta/bar"])
        try:
            assert slices_are_equal(
                repo_refs_slice(repo),
                ["HEAD", "refs/heads/master", "refs/heads/foo", "refs/meta/bar"],
            )
        finally:
            repo.close()

    def test_refs_point_at_returned_hash(self, tmp_path: Path) -> None:
        repo, commit = new_test_repo(tmp_path, ["refs/heads/foo", "refs/meta/bar"])
        try:
            assert repo_refs_check_hash(repo, commit)
        finally:
            repo.close()

    def test_is_not_bare(self, tmp_path: Path) -> None:
        repo, _ = new_test_repo(tmp_path, [])
        try:
            assert not repo.bare
        finally:
            repo.close()

    def test_commit_exists(self, tmp_path: Path) -> None:
        repo, commit = new_test_repo(tmp_path, [])
        try:
            assert repo.head().decode() == commit
            assert repo[commit.encode()].message == b"Initial commit\n"
        finally:
            repo.close()

    def test_no_extra_refs(self, tmp_path: Path) -> None:
        repo, _ = new_test_repo(tmp_path, [])
        try:
            assert slices_are_equal(repo_refs_slice(repo), ["HEAD", "refs/heads/master"])
        finally:
            repo.close()


class TestRepoRefsSlice:
    """Tests for repo_refs_slice and repo_refs."""

    def test_lists_branches(self, tmp_path: Path) -> None:
        repo, _ = new_test_repo(tmp_path, ["refs/heads/a", "refs/heads/b"])
        try:
            assert slices_are_equal(
                repo_refs_slice(repo),
                ["HEAD", "refs/heads/master", "refs/heads/a", "refs/heads/b"],
            )
        finally:
            repo.close()

    def test_repo_refs_targets(self, tmp_path: Path) -> None:
        repo, commit = new_test_repo(tmp_path, ["refs/heads/a"])
        try:
            refs = {ref.name: ref for ref in repo_refs(repo)}
            assert refs["HEAD"].symbolic
            assert refs["HEAD"].target == "refs/heads/master"
            assert refs["refs/heads/a"] == Ref("refs/heads/a", commit)
        finally:
            repo.close()

    def test_repo_refs_sorted(self, tmp_path: Path) -> None:
        repo, _ = new_test_repo(tmp_path, ["refs/heads/z", "refs/heads/a"])
        try:
            names = repo_refs_slice(repo)
            assert names == sorted(names)
        finally:
            repo.close()


class TestRepoRefsCheckHash:
    """Tests for repo_refs_check_hash."""

    def test_matching_hash(self, tmp_path: Path) -> None:
        repo, commit = new_test_repo(tmp_path, ["refs/heads/foo", "refs/meta/bar"])
        try:
            assert repo_refs_check_hash(repo, commit)
        finally:
            repo.close()

    def test_empty_hash(self, tmp_path: Path) -> None:
        repo, _ = new_test_repo(tmp_path, ["refs/heads/foo", "refs/meta/bar"])
        try:
            assert not repo_refs_check_hash(repo, "")
        finally:
            repo.close()

    def test_other_hash(self, tmp_path: Path) -> None:
        repo, _ = new_test_repo(tmp_path, ["refs/heads/foo"])
        try:
            assert not repo_refs_check_hash(repo, "0" * 40)
        finally:
            repo.close()

    def test_one_ref_elsewhere(self, tmp_path: Path) -> None:
        """Test that a single ref pointing at another object fails the check."""
        repo, commit = new_test_repo(tmp_path, ["refs/heads/foo"])
        try:
            repo.refs[b"refs/tags/tree"] = repo[commit.encode()].tree
            assert not repo_refs_check_hash(repo, commit)
        finally:
            repo.close()


class TestOpenRepo:
    """Tests for open_repo."""

    def test_opens_existing(self, tmp_path: Path) -> None:
        new_bare_repo(tmp_path).close()
        repo = open_repo(tmp_path)
        try:
            assert isinstance(repo, Repo)
        finally:
            repo.close()

    def test_not_a_repository(self, tmp_path: Path) -> None:
        with pytest.raises(RepositoryError) as exc_info:
            open_repo(tmp_path)
        assert "Not a git repository" in str(exc_info.value)


class TestSpecsToStrings:
    """Tests for specs_to_strings."""

    def test_empty(self) -> None:
        assert slices_are_equal(specs_to_strings([]), [])

    def test_specs(self) -> None:
        specs = specs_to_strings([RefSpec("foo:bar"), RefSpec(":foo")])
        assert slices_are_equal(specs, ["foo:bar", ":foo"])


class TestRefsToStrings:
    """Tests for refs_to_strings."""

    def test_empty(self) -> None:
        assert slices_are_equal(refs_to_strings([]), [])

    def test_refs(self) -> None:
        refs = refs_to_strings([Ref("foo"), Ref("bar")])
        assert slices_are_equal(refs, ["foo", "bar"])
