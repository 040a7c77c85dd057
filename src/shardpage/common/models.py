"""Cluster snapshot types shared by the pagination engine and the API."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TOKEN_DELIMITER = "$"


class SortOrder(str, Enum):
    """Order in which indices are walked, by creation time."""

    ASCENDING = "ascending"
    DESCENDING = "descending"

    @classmethod
    def parse(cls, value: str) -> SortOrder:
        """Parse a request sort value; accepts ``asc``/``desc`` shorthands."""
        normalized = value.strip().lower()
        aliases = {"asc": cls.ASCENDING, "desc": cls.DESCENDING}
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError("value of sort can either be ascending or descending") from None


class ShardRouting(BaseModel):
    """One copy (primary or replica) of a shard."""

    model_config = ConfigDict(frozen=True)

    index: str
    shard_id: int = Field(ge=0)
    primary: bool = True
    state: str = "STARTED"
    node: str | None = None


class ClusterSnapshot(BaseModel):
    """A single coherent read of index metadata and the routing table."""

    model_config = ConfigDict(frozen=True)

    creation_dates: dict[str, int] = Field(default_factory=dict)
    routing_table: dict[str, dict[int, list[ShardRouting]]] = Field(default_factory=dict)

    @field_validator("creation_dates")
    @classmethod
    def check_creation_dates(cls, value: dict[str, int]) -> dict[str, int]:
        for name, created in value.items():
            if not name or TOKEN_DELIMITER in name:
                raise ValueError(f"invalid index name {name!r}")
            if created < 0:
                raise ValueError(f"index {name!r} has a negative creation date")
        return value

    @model_validator(mode="after")
    def check_routing_table(self) -> ClusterSnapshot:
        unknown = set(self.routing_table) - set(self.creation_dates)
        if unknown:
            raise ValueError(f"routing table references unknown indices: {sorted(unknown)}")
        for index, shards in self.routing_table.items():
            for shard_id, routings in shards.items():
                if shard_id < 0:
                    raise ValueError("shard ids must be non-negative")
                for routing in routings:
                    if (routing.index, routing.shard_id) != (index, shard_id):
                        raise ValueError(
                            f"routing for [{routing.index}][{routing.shard_id}] "
                            f"is listed under [{index}][{shard_id}]"
                        )
        return self

    @property
    def index_names(self) -> list[str]:
        return list(self.creation_dates)

    def creation_date(self, index: str) -> int:
        return self.creation_dates[index]

    def shards(self, index: str) -> dict[int, list[ShardRouting]]:
        """Shard id -> routing entries for ``index``, ordered by shard id."""
        shards = self.routing_table.get(index, {})
        return {shard_id: shards[shard_id] for shard_id in sorted(shards)}

    def without(self, *indices: str) -> ClusterSnapshot:
        """Copy of this snapshot with ``indices`` deleted."""
        dropped = set(indices)
        return ClusterSnapshot(
            creation_dates={k: v for k, v in self.creation_dates.items() if k not in dropped},
            routing_table={k: v for k, v in self.routing_table.items() if k not in dropped},
        )
