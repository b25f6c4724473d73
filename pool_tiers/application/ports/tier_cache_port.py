from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from pool_tiers.domain.entities.pool_tier import PoolTierClassification, Tier, TierStats


class TierCachePort(Protocol):
    def write_cycle(
        self,
        classifications: Sequence[PoolTierClassification],
        *,
        updated_at: datetime,
    ) -> TierStats:
        ...

    def get_classification(self, *, pool_id: str) -> PoolTierClassification | None:
        ...

    def list_by_tier(self, *, tier: Tier) -> list[PoolTierClassification]:
        ...

    def get_aggregate(self) -> TierStats:
        ...

    def ping(self) -> bool:
        ...
