"""Deterministic ordering of a snapshot's indices by creation time."""

from __future__ import annotations

from collections.abc import Iterable
from fnmatch import fnmatchcase

from shardpage.common.models import ClusterSnapshot, SortOrder


def sort_key(snapshot: ClusterSnapshot, index: str) -> tuple[int, str]:
    """Creation time first, index name to break ties."""
    return snapshot.creation_date(index), index


def precedes(key: tuple[int, str], other: tuple[int, str], sort_order: SortOrder) -> bool:
    """Whether ``key`` comes strictly before ``other`` in ``sort_order``."""
    if sort_order is SortOrder.DESCENDING:
        return key > other
    return key < other


def matches_any(index: str, patterns: Iterable[str]) -> bool:
    return any(fnmatchcase(index, pattern) for pattern in patterns)


def order_indices(
    snapshot: ClusterSnapshot,
    sort_order: SortOrder,
    query_start_time: int | None = None,
    patterns: Iterable[str] | None = None,
) -> list[str]:
    """Return the visible index names sorted by creation time.

    Indices created after ``query_start_time`` are dropped so that indices
    added mid-sequence cannot shift positions under an outstanding token.
    ``patterns`` restricts the result to names matching any shell-style pattern.
    """
    selected = list(patterns) if patterns is not None else None
    names = [
        name
        for name in snapshot.index_names
        if (query_start_time is None or snapshot.creation_date(name) <= query_start_time)
        and (selected is None or matches_any(name, selected))
    ]
    return sorted(
        names,
        key=lambda name: sort_key(snapshot, name),
        reverse=sort_order is SortOrder.DESCENDING,
    )
