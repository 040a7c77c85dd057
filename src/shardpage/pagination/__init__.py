"""Stateless shard pagination -- ordering, tokens, page walk and drift recovery."""

from shardpage.pagination.drift import ResumePoint, resolve_drift
from shardpage.pagination.engine import InvalidPageSizeError, Page, ShardEntry, paginate
from shardpage.pagination.ordering import order_indices
from shardpage.pagination.params import PageParams
from shardpage.pagination.token import (
    ContinuationToken,
    MalformedTokenError,
    decode_token,
    encode_token,
)

__all__ = [
    "ContinuationToken",
    "InvalidPageSizeError",
    "MalformedTokenError",
    "Page",
    "PageParams",
    "ResumePoint",
    "ShardEntry",
    "decode_token",
    "encode_token",
    "order_indices",
    "paginate",
    "resolve_drift",
]
