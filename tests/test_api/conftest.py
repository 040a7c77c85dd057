"""API test fixtures -- AsyncClient with dependency overrides."""

import pytest
from httpx import ASGITransport, AsyncClient

from shardpage.api.deps import get_cluster_source, get_settings
from shardpage.api.main import create_app
from shardpage.cluster.source import InMemoryClusterStateSource
from shardpage.common.config import Settings


@pytest.fixture
def cluster_source(scenario_a_snapshot):
    return InMemoryClusterStateSource(scenario_a_snapshot)


@pytest.fixture
def api_settings():
    return Settings(_env_file=None, list_shards_default_page_size=4, list_shards_max_page_size=10)


@pytest.fixture
def app(cluster_source, api_settings):
    """Create app with the cluster source and settings overridden."""
    application = create_app()
    application.state.cluster_source = cluster_source
    application.dependency_overrides[get_cluster_source] = lambda: cluster_source
    application.dependency_overrides[get_settings] = lambda: api_settings
    return application


@pytest.fixture
async def client(app):
    """Async test client that bypasses lifespan."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
