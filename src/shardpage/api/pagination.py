"""Response envelope and row schema for paginated list endpoints."""

from typing import Generic, TypeVar

from pydantic import BaseModel

from shardpage.common.models import ShardRouting

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response envelope; a null next_token marks the last page."""

    items: list[T]
    indices: list[str] = []
    next_token: str | None = None


class ShardRow(BaseModel):
    index: str
    shard: int
    prirep: str
    state: str
    node: str | None = None

    @classmethod
    def from_routing(cls, routing: ShardRouting) -> "ShardRow":
        return cls(
            index=routing.index,
            shard=routing.shard_id,
            prirep="p" if routing.primary else "r",
            state=routing.state,
            node=routing.node,
        )
