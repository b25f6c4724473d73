from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
import logging
from typing import Iterable

from pool_tiers.domain.entities.pool_tier import (
    PoolSnapshot,
    PoolTierClassification,
    Tier,
    TierStats,
)
from pool_tiers.domain.exceptions import ClassificationDegradedError, ConfigurationError
from pool_tiers.domain.services.asset_pricing import AssetPricingTable


logger = logging.getLogger(__name__)


DEFAULT_TIER_1_MIN_TVL = Decimal("1000000")
DEFAULT_TIER_2_MIN_TVL = Decimal("250000")


@dataclass(frozen=True)
class TierThresholds:
    tier_1_min_tvl: Decimal = DEFAULT_TIER_1_MIN_TVL
    tier_2_min_tvl: Decimal = DEFAULT_TIER_2_MIN_TVL

    def __post_init__(self) -> None:
        if self.tier_2_min_tvl < 0:
            raise ConfigurationError("tier_2_min_tvl must be >= 0.")
        if self.tier_1_min_tvl <= self.tier_2_min_tvl:
            raise ConfigurationError("tier_1_min_tvl must be greater than tier_2_min_tvl.")


def _reserve_amount(raw_amount: str | None, *, pool_id: str) -> Decimal:
    if raw_amount is None:
        raise ClassificationDegradedError("reserve amount is missing.", pool_id=pool_id)
    try:
        amount = Decimal(str(raw_amount).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ClassificationDegradedError(
            f"reserve amount is not numeric: {raw_amount!r}",
            pool_id=pool_id,
        ) from exc
    if not amount.is_finite():
        raise ClassificationDegradedError(
            f"reserve amount is not finite: {raw_amount!r}",
            pool_id=pool_id,
        )
    if amount < 0:
        raise ClassificationDegradedError(
            f"reserve amount is negative: {raw_amount!r}",
            pool_id=pool_id,
        )
    return amount


def estimate_tvl(snapshot: PoolSnapshot, *, pricing: AssetPricingTable) -> Decimal:
    total = Decimal("0")
    for reserve in snapshot.reserves:
        if not reserve.asset:
            raise ClassificationDegradedError(
                "reserve asset is missing.",
                pool_id=snapshot.pool_id,
            )
        amount = _reserve_amount(reserve.amount, pool_id=snapshot.pool_id)
        try:
            total += amount * pricing.multiplier_for(reserve.asset)
        except ArithmeticError as exc:
            raise ClassificationDegradedError(
                f"reserve value out of range: {reserve.amount!r}",
                pool_id=snapshot.pool_id,
            ) from exc
    return total


def assign_tier(tvl: Decimal, *, thresholds: TierThresholds) -> Tier:
    if tvl >= thresholds.tier_1_min_tvl:
        return Tier.TIER_1
    if tvl >= thresholds.tier_2_min_tvl:
        return Tier.TIER_2
    return Tier.TIER_3


def classify_pool(
    snapshot: PoolSnapshot,
    *,
    pricing: AssetPricingTable,
    thresholds: TierThresholds,
    classified_at: datetime,
) -> PoolTierClassification:
    try:
        tvl = estimate_tvl(snapshot, pricing=pricing)
    except ClassificationDegradedError as exc:
        logger.warning(
            "tier_classification: degraded pool=%s reason=%s",
            exc.pool_id or snapshot.pool_id,
            exc,
        )
        return PoolTierClassification(
            pool_id=snapshot.pool_id,
            tvl=Decimal("0"),
            tier=Tier.TIER_3,
            reserves=snapshot.reserves,
            total_accounts=snapshot.total_accounts,
            total_shares=snapshot.total_shares,
            last_modified=snapshot.last_modified,
            timestamp=classified_at,
            error=str(exc),
        )

    return PoolTierClassification(
        pool_id=snapshot.pool_id,
        tvl=tvl,
        tier=assign_tier(tvl, thresholds=thresholds),
        reserves=snapshot.reserves,
        total_accounts=snapshot.total_accounts,
        total_shares=snapshot.total_shares,
        last_modified=snapshot.last_modified,
        timestamp=classified_at,
    )


def classify_pools(
    snapshots: Iterable[PoolSnapshot],
    *,
    pricing: AssetPricingTable,
    thresholds: TierThresholds,
    classified_at: datetime,
) -> list[PoolTierClassification]:
    return [
        classify_pool(
            snapshot,
            pricing=pricing,
            thresholds=thresholds,
            classified_at=classified_at,
        )
        for snapshot in snapshots
    ]


def summarize_tiers(
    classifications: Iterable[PoolTierClassification],
    *,
    updated_at: datetime,
) -> TierStats:
    counts = {tier: 0 for tier in Tier}
    total = 0
    for item in classifications:
        counts[item.tier] += 1
        total += 1
    return TierStats(
        tier_1=counts[Tier.TIER_1],
        tier_2=counts[Tier.TIER_2],
        tier_3=counts[Tier.TIER_3],
        total=total,
        last_update=updated_at,
    )
