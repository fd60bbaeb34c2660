"""Materialized-path node IDs.

A node ID is a dot-separated sequence of positive integers giving the
node's position from the root, e.g. ``1.2.3``. The parent of ``1.2.3``
is ``1.2``; top-level nodes have no parent.

INVARIANT: A child's ID is always ``parent_id + "." + N``. Sibling order
is numeric, never lexical (``1.10`` sorts after ``1.9``).
"""

from __future__ import annotations

import re
from collections.abc import Iterable

ID_PATTERN = re.compile(r"^\d+(?:\.\d+)*$")


def is_valid_id(node_id: str) -> bool:
    """Check whether *node_id* is a well-formed materialized path."""
    return ID_PATTERN.match(node_id) is not None


def split_id(node_id: str) -> list[int]:
    """Numeric segments of *node_id*. Non-numeric segments count as 0."""
    return [int(part) if part.isdigit() else 0 for part in node_id.split(".")]


def sort_key(node_id: str) -> tuple[int, ...]:
    """Comparator key ordering IDs segment by segment, numerically."""
    return tuple(split_id(node_id))


def sorted_ids(ids: Iterable[str]) -> list[str]:
    """Return *ids* in numeric materialized-path order."""
    return sorted(ids, key=sort_key)


def last_segment(node_id: str) -> int:
    """Trailing sibling number of *node_id*."""
    return split_id(node_id)[-1]


def parent_of(node_id: str) -> str | None:
    """Parent ID, or None for a top-level node.

    Examples:
        >>> parent_of("1.2.3")
        '1.2'
        >>> parent_of("4") is None
        True
    """
    head, sep, _ = node_id.rpartition(".")
    return head if sep else None


def child_id(parent_id: str | None, number: int) -> str:
    """ID of sibling *number* under *parent_id* (root when None)."""
    return str(number) if parent_id is None else f"{parent_id}.{number}"


def is_within(node_id: str, ancestor_id: str) -> bool:
    """True when *node_id* is *ancestor_id* or one of its descendants."""
    return node_id == ancestor_id or node_id.startswith(ancestor_id + ".")


def rebase_id(node_id: str, old_prefix: str, new_prefix: str) -> str:
    """Replace the *old_prefix* of *node_id* with *new_prefix*, keeping the suffix.

    Examples:
        >>> rebase_id("1.2.3", "1.2", "4")
        '4.3'
    """
    assert is_within(node_id, old_prefix), f"{node_id} is not under {old_prefix}"
    return new_prefix + node_id[len(old_prefix) :]
