"""_list/shards endpoint -- page through every shard of the cluster."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from shardpage.api.deps import get_cluster_source, get_settings
from shardpage.api.pagination import PaginatedResponse, ShardRow
from shardpage.cluster.source import ClusterStateSource
from shardpage.common.config import Settings
from shardpage.common.logging import bind_page_request
from shardpage.pagination import InvalidPageSizeError, MalformedTokenError, PageParams, paginate
from shardpage.pagination.params import PARAM_NEXT_TOKEN, PARAM_SIZE, PARAM_SORT

logger = structlog.get_logger()
router = APIRouter()


async def _list_shards(
    patterns: list[str] | None,
    next_token: str | None,
    sort: str | None,
    size: int | None,
    source: ClusterStateSource,
    config: Settings,
) -> PaginatedResponse[ShardRow]:
    try:
        params = PageParams.parse(
            next_token,
            sort,
            size,
            default_size=config.list_shards_default_page_size,
            max_size=config.list_shards_max_page_size,
        )
    except MalformedTokenError as exc:
        logger.info("list_shards_bad_token", reason=exc.detail)
        raise HTTPException(status_code=400, detail=f"Invalid {PARAM_NEXT_TOKEN}")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    bind_page_request(params.sort.value, params.size, paged=params.requested_token is not None)
    snapshot = await source.get_snapshot()
    try:
        page = paginate(snapshot, params.requested_token, params.size, params.sort, patterns=patterns)
    except InvalidPageSizeError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return PaginatedResponse(
        items=[ShardRow.from_routing(routing) for routing in page.routings],
        indices=list(page.queried_indices),
        next_token=page.next_token.encode() if page.next_token else None,
    )


@router.get("/_list/shards", response_model=PaginatedResponse[ShardRow])
async def list_shards(
    next_token: str | None = Query(default=None, alias=PARAM_NEXT_TOKEN),
    sort: str | None = Query(default=None, alias=PARAM_SORT),
    size: int | None = Query(default=None, alias=PARAM_SIZE),
    source: ClusterStateSource = Depends(get_cluster_source),
    config: Settings = Depends(get_settings),
):
    """List shards of all indices, one page per call."""
    return await _list_shards(None, next_token, sort, size, source, config)


@router.get("/_list/shards/{index}", response_model=PaginatedResponse[ShardRow])
async def list_index_shards(
    index: str,
    next_token: str | None = Query(default=None, alias=PARAM_NEXT_TOKEN),
    sort: str | None = Query(default=None, alias=PARAM_SORT),
    size: int | None = Query(default=None, alias=PARAM_SIZE),
    source: ClusterStateSource = Depends(get_cluster_source),
    config: Settings = Depends(get_settings),
):
    """List shards of the given comma-separated indices or wildcard patterns."""
    patterns = [part.strip() for part in index.split(",") if part.strip()]
    return await _list_shards(patterns, next_token, sort, size, source, config)
