"""Convenience wrappers around dulwich repositories.

These helpers create the repositories refmirror works with (a bare
scratch repository for each mirror run, small seeded repositories for
tests) and flatten their refs into plain strings.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from pathlib import Path

from dulwich.errors import NotGitRepository
from dulwich.objects import Blob, Commit, Tree
from dulwich.repo import Repo

from refmirror.core.exceptions import RepositoryError
from refmirror.core.models import DEFAULT_BRANCH, HEAD_REF, Ref, RefSpec

logger = logging.getLogger(__name__)

SYMREF_PREFIX = b"ref: "
TEST_IDENTITY = b"refmirror <refmirror@localhost>"


def _set_head(repo: Repo) -> None:
    # Pin HEAD so the result does not depend on the user's init.defaultBranch.
    repo.refs.set_symbolic_ref(HEAD_REF.encode(), DEFAULT_BRANCH.encode())


def new_bare_repo(path: str | Path) -> Repo:
    """Initialise a bare repository in the existing directory ``path``.

    The new repository holds no objects and a single symbolic ``HEAD``
    pointing at ``refs/heads/master``.

    Raises:
        RepositoryError: If the repository cannot be created.
    """
    try:
        repo = Repo.init_bare(str(path))
    except OSError as e:
        raise RepositoryError(f"Failed to create bare repository: {e}", path=str(path)) from e
    _set_head(repo)
    logger.debug(f"Created bare repository in {path}")
    return repo


def new_test_repo(path: str | Path, refs: Iterable[str]) -> tuple[Repo, str]:
    """Create a repository with one commit and ``refs`` pointing at it.

    The commit lands on ``refs/heads/master`` and ``HEAD`` points to that
    branch; every name in ``refs`` becomes a hash ref to the same commit.

    Args:
        path: Existing, empty directory for the working tree.
        refs: Full ref names to create, e.g. ``refs/heads/foo``.

    Returns:
        Tuple of (repository, hex id of the commit).

    Raises:
        RepositoryError: If the repository cannot be created.
    """
    try:
        repo = Repo.init(str(path))
    except OSError as e:
        raise RepositoryError(f"Failed to create repository: {e}", path=str(path)) from e
    _set_head(repo)

    blob = Blob.from_string(b"refmirror test repository\n")
    tree = Tree()
    tree.add(b"README", 0o100644, blob.id)

    now = int(time.time())
    commit = Commit()
    commit.tree = tree.id
    commit.author = commit.committer = TEST_IDENTITY
    commit.author_time = commit.commit_time = now
    commit.author_timezone = commit.commit_timezone = 0
    commit.encoding = b"UTF-8"
    commit.message = b"Initial commit\n"

    for obj in (blob, tree, commit):
        repo.object_store.add_object(obj)

    repo.refs[DEFAULT_BRANCH.encode()] = commit.id
    for name in refs:
        repo.refs[name.encode()] = commit.id

    return repo, commit.id.decode("ascii")


def open_repo(path: str | Path) -> Repo:
    """Open an existing repository, bare or not.

    Raises:
        RepositoryError: If ``path`` is not a git repository.
    """
    try:
        return Repo(str(path))
    except NotGitRepository as e:
        raise RepositoryError("Not a git repository", path=str(path)) from e
    except OSError as e:
        raise RepositoryError(f"Failed to open repository: {e}", path=str(path)) from e


def repo_refs(repo: Repo) -> list[Ref]:
    """Return every ref in ``repo``, including ``HEAD``, sorted by name."""
    refs = []
    for name in sorted(repo.refs.allkeys()):
        value = repo.refs.read_ref(name) or b""
        if value.startswith(SYMREF_PREFIX):
            refs.append(Ref(name.decode(), value[len(SYMREF_PREFIX):].decode(), symbolic=True))
        else:
            refs.append(Ref(name.decode(), value.decode("ascii")))
    return refs


def repo_refs_slice(repo: Repo) -> list[str]:
    """Return the names of every ref in ``repo``, including ``HEAD``."""
    return refs_to_strings(repo_refs(repo))


def repo_refs_check_hash(repo: Repo, commit_hash: str) -> bool:
    """Check that every hash ref in ``repo`` points at ``commit_hash``.

    Symbolic refs are skipped since they resolve to one of the hash refs.
    """
    for ref in repo_refs(repo):
        if ref.symbolic:
            continue
        if ref.target != commit_hash:
            logger.debug(f"{ref.name} points at {ref.target}, expected {commit_hash!r}")
            return False
    return True


def specs_to_strings(specs: Iterable[RefSpec]) -> list[str]:
    return [str(spec) for spec in specs]


def refs_to_strings(refs: Iterable[Ref]) -> list[str]:
    return [ref.name for ref in refs]
