from __future__ import annotations

from pool_tiers.application.ports.tier_cache_port import TierCachePort
from pool_tiers.domain.entities.pool_tier import TierStats


class GetLiquidityStatsUseCase:
    def __init__(self, *, tier_cache_port: TierCachePort):
        self._tier_cache_port = tier_cache_port

    def execute(self) -> TierStats:
        return self._tier_cache_port.get_aggregate()
