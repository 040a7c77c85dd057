"""Shared test fixtures for the shardpage test suite."""

from collections.abc import Callable, Mapping, Sequence

import pytest

from shardpage.common.models import ClusterSnapshot, ShardRouting, SortOrder
from shardpage.pagination import Page, paginate

# index name -> (creation date, routing entries per shard); a list numbers shards from 0
IndexLayout = Mapping[str, tuple[int, Sequence[int] | Mapping[int, int]]]


def _routings(index: str, shard_id: int, copies: int) -> list[ShardRouting]:
    return [
        ShardRouting(index=index, shard_id=shard_id, primary=copy == 0, node=f"node-{copy}")
        for copy in range(copies)
    ]


@pytest.fixture
def make_snapshot() -> Callable[[IndexLayout], ClusterSnapshot]:
    def _make(layout: IndexLayout) -> ClusterSnapshot:
        creation_dates = {}
        routing_table = {}
        for name, (created, shards) in layout.items():
            creation_dates[name] = created
            copies_by_shard = shards if isinstance(shards, Mapping) else dict(enumerate(shards))
            routing_table[name] = {
                shard_id: _routings(name, shard_id, copies) for shard_id, copies in copies_by_shard.items()
            }
        return ClusterSnapshot(creation_dates=creation_dates, routing_table=routing_table)

    return _make


@pytest.fixture
def scenario_a_snapshot(make_snapshot) -> ClusterSnapshot:
    """A(t=100, 2 shards), B(t=200, 2 shards), C(t=300, 1 shard), one copy each."""
    return make_snapshot({"A": (100, [1, 1]), "B": (200, [1, 1]), "C": (300, [1])})


@pytest.fixture
def drain() -> Callable[..., list[Page]]:
    """Page through a fixed snapshot until the engine reports completion."""

    def _drain(
        snapshot: ClusterSnapshot,
        max_page_size: int,
        sort_order: SortOrder = SortOrder.ASCENDING,
        patterns: Sequence[str] | None = None,
        max_pages: int = 1000,
    ) -> list[Page]:
        pages = []
        token = None
        for _ in range(max_pages):
            page = paginate(snapshot, token, max_page_size, sort_order, patterns=patterns)
            pages.append(page)
            if page.next_token is None:
                return pages
            token = page.next_token
        raise AssertionError(f"pagination did not finish within {max_pages} pages")

    return _drain

