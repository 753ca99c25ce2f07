"""Order-insensitive helpers for sequences of strings.

Ref names and refspec strings come back from git in no guaranteed order,
so comparisons between two listings go through these helpers.
"""

from __future__ import annotations

from collections.abc import Sequence


def sort_slice(values: Sequence[str]) -> list[str]:
    """Return a new list with ``values`` sorted ascending.

    The input is left untouched.

    Example:
        >>> refs = ["b", "a"]
        >>> sort_slice(refs)
        ['a', 'b']
        >>> refs
        ['b', 'a']
    """
    return sorted(values)


def slices_are_equal(a: Sequence[str], b: Sequence[str]) -> bool:
    """Check whether two sequences hold the same elements, ignoring order.

    Repeated elements count: ``["a"]`` and ``["a", "a"]`` differ, as do
    ``[""]`` and ``["", ""]``.
    """
    if len(a) != len(b):
        return False
    return sort_slice(a) == sort_slice(b)
