"""Utility modules for refmirror.

This package provides:
- slices: order-insensitive sorting and comparison of string sequences
- repo: dulwich repository helpers and ref/refspec string conversion
"""

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
from refmirror.utils.slices import slices_are_equal, sort_slice

__all__ = [
    "new_bare_repo",
    "new_test_repo",
    "open_repo",
    "refs_to_strings",
    "repo_refs",
    "repo_refs_check_hash",
    "repo_refs_slice",
    "slices_are_equal",
    "sort_slice",
    "specs_to_strings",
]
