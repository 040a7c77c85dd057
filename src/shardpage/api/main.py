"""FastAPI application factory."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from shardpage.api.middleware import CorrelationIdMiddleware, RequestLoggingMiddleware
from shardpage.api.routes import shards
from shardpage.cluster.source import FileClusterStateSource
from shardpage.common.config import settings
from shardpage.common.logging import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    configure_logging(settings.log_level)
    settings.validate_page_sizes()

    # --- Cluster state source ---
    cluster_source = None
    if settings.cluster_state_path:
        cluster_source = FileClusterStateSource(settings.cluster_state_path)
        logger.info("cluster_source_configured", path=settings.cluster_state_path)
    else:
        logger.warning(
            "cluster_source_missing",
            detail="CLUSTER_STATE_PATH is empty -- _list/shards will return 503.",
        )
    app.state.cluster_source = cluster_source

    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Shardpage API",
        description="Stateless paginated listing of cluster shards",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Middleware (order matters -- outermost first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "X-Correlation-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    # Routes
    app.include_router(shards.router, prefix="/api", tags=["shards"])

    @app.get("/api/health")
    async def health(request: Request):
        configured = getattr(request.app.state, "cluster_source", None) is not None
        return {
            "status": "healthy" if configured else "degraded",
            "services": {"cluster_state": "configured" if configured else "missing"},
        }

    return app


app = create_app()
