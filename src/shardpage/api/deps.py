"""FastAPI dependency injection."""

from __future__ import annotations

from fastapi import HTTPException, Request

from shardpage.cluster.source import ClusterStateSource
from shardpage.common.config import Settings, settings


def get_settings() -> Settings:
    return settings


def get_cluster_source(request: Request) -> ClusterStateSource:
    source: ClusterStateSource | None = getattr(request.app.state, "cluster_source", None)
    if source is None:
        raise HTTPException(status_code=503, detail="Cluster state source not configured")
    return source
