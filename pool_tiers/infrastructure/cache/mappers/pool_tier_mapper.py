from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
import json
from typing import Any

from pool_tiers.domain.entities.pool_tier import (
    PoolReserve,
    PoolTierClassification,
    Tier,
    TierStats,
)


def map_classification_to_hash(item: PoolTierClassification) -> dict[str, str]:
    fields = {
        "tier": item.tier.value,
        "tvl": str(item.tvl),
        "timestamp": item.timestamp.isoformat(),
        "totalAccounts": str(item.total_accounts),
        "totalShares": item.total_shares,
        "lastModified": item.last_modified or "",
        "reserves": json.dumps(
            [{"asset": reserve.asset, "amount": reserve.amount} for reserve in item.reserves]
        ),
    }
    if item.error is not None:
        fields["error"] = item.error
    return fields


def map_hash_to_classification(pool_id: str, row: Mapping[str, Any]) -> PoolTierClassification:
    raw_reserves = json.loads(row.get("reserves") or "[]")
    return PoolTierClassification(
        pool_id=pool_id,
        tvl=Decimal(str(row.get("tvl") or "0")),
        tier=Tier(row["tier"]),
        reserves=tuple(
            PoolReserve(asset=reserve.get("asset"), amount=reserve.get("amount"))
            for reserve in raw_reserves
        ),
        total_accounts=int(row.get("totalAccounts") or 0),
        total_shares=str(row.get("totalShares") or "0"),
        last_modified=row.get("lastModified") or None,
        timestamp=datetime.fromisoformat(row["timestamp"]),
        error=row.get("error") or None,
    )


def map_stats_to_hash(stats: TierStats) -> dict[str, str]:
    return {
        Tier.TIER_1.value: str(stats.tier_1),
        Tier.TIER_2.value: str(stats.tier_2),
        Tier.TIER_3.value: str(stats.tier_3),
        "total": str(stats.total),
        "lastUpdate": stats.last_update.isoformat() if stats.last_update else "",
    }


def map_hash_to_stats(row: Mapping[str, Any]) -> TierStats:
    if not row:
        return TierStats.empty()
    last_update = row.get("lastUpdate")
    return TierStats(
        tier_1=int(row.get(Tier.TIER_1.value) or 0),
        tier_2=int(row.get(Tier.TIER_2.value) or 0),
        tier_3=int(row.get(Tier.TIER_3.value) or 0),
        total=int(row.get("total") or 0),
        last_update=datetime.fromisoformat(last_update) if last_update else None,
    )
