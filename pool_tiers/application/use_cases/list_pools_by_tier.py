from __future__ import annotations

from pool_tiers.application.dto.pool_tier import ListPoolsByTierInput
from pool_tiers.application.ports.tier_cache_port import TierCachePort
from pool_tiers.domain.entities.pool_tier import PoolTierClassification, Tier
from pool_tiers.domain.exceptions import InvalidTierArgumentError


def parse_tier(value: str) -> Tier:
    try:
        return Tier(value)
    except ValueError as exc:
        allowed = ", ".join(tier.value for tier in Tier)
        raise InvalidTierArgumentError(f"Invalid tier. Use one of: {allowed}.") from exc


class ListPoolsByTierUseCase:
    def __init__(self, *, tier_cache_port: TierCachePort):
        self._tier_cache_port = tier_cache_port

    def execute(self, command: ListPoolsByTierInput) -> list[PoolTierClassification]:
        tier = parse_tier(command.tier)
        return self._tier_cache_port.list_by_tier(tier=tier)
