from __future__ import annotations

from pool_tiers.application.dto.pool_tier import GetPoolTierInput
from pool_tiers.application.ports.tier_cache_port import TierCachePort
from pool_tiers.domain.entities.pool_tier import PoolTierClassification
from pool_tiers.domain.exceptions import PoolNotFoundError


class GetPoolTierUseCase:
    def __init__(self, *, tier_cache_port: TierCachePort):
        self._tier_cache_port = tier_cache_port

    def execute(self, command: GetPoolTierInput) -> PoolTierClassification:
        classification = self._tier_cache_port.get_classification(pool_id=command.pool_id)
        if classification is None:
            raise PoolNotFoundError("Pool not found.")
        return classification
