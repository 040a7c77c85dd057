"""ClusterStateSource Protocol and the snapshot providers behind it.

The pagination engine never fetches cluster state itself. Callers obtain one
coherent ClusterSnapshot per request from a source and hand it to the engine.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from shardpage.common.models import ClusterSnapshot

logger = structlog.get_logger()


@runtime_checkable
class ClusterStateSource(Protocol):
    """Structural interface for anything that can produce a cluster snapshot."""

    async def get_snapshot(self) -> ClusterSnapshot: ...


class InMemoryClusterStateSource:
    """Serves a fixed snapshot; replace it to simulate topology changes."""

    def __init__(self, snapshot: ClusterSnapshot) -> None:
        self.snapshot = snapshot

    async def get_snapshot(self) -> ClusterSnapshot:
        return self.snapshot


class FileClusterStateSource:
    """Re-reads a JSON snapshot from disk on every call."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> ClusterSnapshot:
        return ClusterSnapshot.model_validate_json(self.path.read_bytes())

    async def get_snapshot(self) -> ClusterSnapshot:
        snapshot = await asyncio.to_thread(self._load)
        logger.debug(
            "cluster_snapshot_loaded",
            path=str(self.path),
            indices=len(snapshot.creation_dates),
        )
        return snapshot
