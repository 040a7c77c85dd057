"""Recovery of a resume point when a token's anchor index has moved or vanished."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from shardpage.common.models import ClusterSnapshot, SortOrder
from shardpage.pagination.ordering import precedes, sort_key
from shardpage.pagination.token import ContinuationToken

logger = structlog.get_logger()


@dataclass(frozen=True)
class ResumePoint:
    """Where a page walk starts: a position in the sorted list and a shard id."""

    index_position: int
    shard_offset: int


def resolve_drift(
    ordered: list[str],
    snapshot: ClusterSnapshot,
    token: ContinuationToken,
    sort_order: SortOrder,
) -> ResumePoint:
    """Find a safe resume point after the anchor index moved or was deleted.

    Scans backward from the remembered position. Finding the anchor itself
    means only earlier indices were deleted, so the shard offset still holds.
    Finding an index that sorts strictly before the anchor means everything up
    to it was already returned and the walk resumes right after it.
    """
    anchor_key = (token.anchor_creation_time, token.anchor_index_name)
    position = min(token.index_position, len(ordered) - 1)

    while position >= 0:
        name = ordered[position]
        key = sort_key(snapshot, name)
        if key == anchor_key:
            logger.debug(
                "pagination_anchor_relocated",
                anchor=token.anchor_index_name,
                expected_position=token.index_position,
                position=position,
            )
            return ResumePoint(position, token.last_shard_id + 1)
        if precedes(key, anchor_key, sort_order):
            break
        position -= 1

    # position is -1 when every surviving index sorts after the anchor
    resume = ResumePoint(position + 1, 0)
    logger.warning(
        "pagination_anchor_missing",
        anchor=token.anchor_index_name,
        anchor_creation_time=token.anchor_creation_time,
        expected_position=token.index_position,
        resume_position=resume.index_position,
        remaining=len(ordered) - resume.index_position,
    )
    return resume
