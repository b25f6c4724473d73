from __future__ import annotations

from pool_tiers.api.schemas.pool_tier import (
    PoolReserveResponse,
    PoolTierResponse,
    TierStatsResponse,
)
from pool_tiers.domain.entities.pool_tier import PoolTierClassification, TierStats


def to_pool_tier_response(item: PoolTierClassification) -> PoolTierResponse:
    return PoolTierResponse(
        pool_id=item.pool_id,
        tier=item.tier.value,
        tvl=item.tvl,
        timestamp=item.timestamp,
        total_accounts=item.total_accounts,
        total_shares=item.total_shares,
        last_modified=item.last_modified,
        reserves=[
            PoolReserveResponse(asset=reserve.asset, amount=reserve.amount)
            for reserve in item.reserves
        ],
        error=item.error,
    )


def to_tier_stats_response(stats: TierStats) -> TierStatsResponse:
    return TierStatsResponse(
        TIER_1=stats.tier_1,
        TIER_2=stats.tier_2,
        TIER_3=stats.tier_3,
        total=stats.total,
        last_update=stats.last_update,
    )
