"""Shard-based pagination over a live, mutating cluster.

Each call is a pure function of ``(snapshot, token)``: indices are sorted by
creation time, shards are walked in id order until the page would exceed the
size bound, and the position reached is encoded into the next token. There is
no server-side cursor; the snapshot is re-read on every call and a token whose
anchor index no longer sits where it was left is repaired by the drift resolver.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from shardpage.common.models import ClusterSnapshot, ShardRouting, SortOrder
from shardpage.pagination.drift import ResumePoint, resolve_drift
from shardpage.pagination.ordering import order_indices, sort_key
from shardpage.pagination.token import ContinuationToken

logger = structlog.get_logger()


class InvalidPageSizeError(ValueError):
    """The page size cannot hold even a single shard."""


@dataclass(frozen=True)
class ShardEntry:
    """All routing entries of one shard, as placed on a page."""

    index: str
    shard_id: int
    routings: tuple[ShardRouting, ...]


@dataclass(frozen=True)
class Page:
    """One bounded batch of shards plus the token for the next batch."""

    shard_entries: tuple[ShardEntry, ...] = ()
    queried_indices: tuple[str, ...] = ()
    next_token: ContinuationToken | None = None
    routing_count: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "routing_count", sum(len(entry.routings) for entry in self.shard_entries)
        )

    @property
    def routings(self) -> list[ShardRouting]:
        return [routing for entry in self.shard_entries for routing in entry.routings]

    @property
    def is_last(self) -> bool:
        return self.next_token is None


def _resolve_start(
    ordered: list[str],
    snapshot: ClusterSnapshot,
    token: ContinuationToken | None,
    sort_order: SortOrder,
) -> ResumePoint:
    if token is None:
        return ResumePoint(0, 0)
    position = token.index_position
    anchor_key = (token.anchor_creation_time, token.anchor_index_name)
    if position < len(ordered) and sort_key(snapshot, ordered[position]) == anchor_key:
        return ResumePoint(position, token.last_shard_id + 1)
    return resolve_drift(ordered, snapshot, token, sort_order)


def paginate(
    snapshot: ClusterSnapshot,
    token: ContinuationToken | None,
    max_page_size: int,
    sort_order: SortOrder,
    patterns: Iterable[str] | None = None,
) -> Page:
    """Compute the page that follows ``token`` (or the first page).

    A shard is placed only if the running count of routing entries stays
    within ``max_page_size``; the shard that would overflow is deferred whole
    to the next page. Raises InvalidPageSizeError when the first shard of the
    page alone exceeds the bound, since no progress would be possible.
    """
    if max_page_size < 1:
        raise InvalidPageSizeError(f"page size must be at least 1, got {max_page_size}")

    ordered = order_indices(
        snapshot,
        sort_order,
        query_start_time=token.query_start_time if token else None,
        patterns=patterns,
    )
    if not ordered:
        return Page()

    if token is not None:
        query_start_time = token.query_start_time
    else:
        newest = ordered[0] if sort_order is SortOrder.DESCENDING else ordered[-1]
        query_start_time = snapshot.creation_date(newest)

    start = _resolve_start(ordered, snapshot, token, sort_order)

    entries: list[ShardEntry] = []
    queried: list[str] = []
    routing_count = 0
    last_shard_id = -1
    overflow = False

    position = start.index_position
    offset = start.shard_offset
    while position < len(ordered):
        index = ordered[position]
        remaining = [(sid, rs) for sid, rs in snapshot.shards(index).items() if sid >= offset]
        if position == start.index_position and not remaining:
            # the previous page already returned every shard of this index
            offset = 0
            position += 1
            continue
        offset = 0

        contributed = False
        for shard_id, routings in remaining:
            routing_count += len(routings)
            if routing_count > max_page_size:
                overflow = True
                break
            entries.append(ShardEntry(index, shard_id, tuple(routings)))
            last_shard_id = shard_id
            contributed = True

        if overflow:
            if contributed:
                queried.append(index)
            break
        queried.append(index)
        position += 1

    next_token = None
    if overflow:
        if not entries:
            shard_id, routings = remaining[0]
            raise InvalidPageSizeError(
                f"shard [{index}][{shard_id}] has {len(routings)} routing entries, "
                f"more than the page size {max_page_size}"
            )
        anchor = index if contributed else ordered[position - 1]
        next_token = ContinuationToken(
            last_shard_id=last_shard_id,
            index_position=position,
            anchor_creation_time=snapshot.creation_date(anchor),
            query_start_time=query_start_time,
            anchor_index_name=anchor,
        )

    page = Page(tuple(entries), tuple(queried), next_token)
    logger.debug(
        "shard_page_built",
        sort=sort_order.value,
        max_page_size=max_page_size,
        start_position=start.index_position,
        shards=len(page.shard_entries),
        routings=page.routing_count,
        indices=len(page.queried_indices),
        has_next=next_token is not None,
    )
    return page
