"""Query parameters common to paginated list requests."""

from __future__ import annotations

from dataclasses import dataclass

from shardpage.common.models import SortOrder
from shardpage.pagination.token import ContinuationToken, decode_token

PARAM_SORT = "sort"
PARAM_NEXT_TOKEN = "next_token"
PARAM_SIZE = "size"


@dataclass(frozen=True)
class PageParams:
    sort: SortOrder
    size: int
    requested_token: ContinuationToken | None = None

    @classmethod
    def parse(
        cls,
        next_token: str | None,
        sort: str | None,
        size: int | None,
        *,
        default_size: int,
        max_size: int,
    ) -> PageParams:
        """Validate raw request values.

        The token is decoded here so a tainted next_token is rejected before any
        cluster state is fetched.
        """
        sort_order = SortOrder.parse(sort) if sort else SortOrder.ASCENDING
        page_size = default_size if size is None else size
        if page_size < 1:
            raise ValueError(f"{PARAM_SIZE} must be greater than [0]")
        if page_size > max_size:
            raise ValueError(f"{PARAM_SIZE} should be less than [{max_size}]")
        token = decode_token(next_token) if next_token else None
        return cls(sort=sort_order, size=page_size, requested_token=token)
