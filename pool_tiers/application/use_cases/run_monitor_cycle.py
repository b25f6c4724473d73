from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Callable

from pool_tiers.application.dto.pool_tier import MonitorCycleOutput
from pool_tiers.application.ports.pool_source_port import PoolSourcePort
from pool_tiers.application.ports.tier_cache_port import TierCachePort
from pool_tiers.domain.services.asset_pricing import AssetPricingTable
from pool_tiers.domain.services.tier_classification import TierThresholds, classify_pools


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RunMonitorCycleUseCase:
    """One fetch -> classify -> store pass.

    Source and store errors propagate to the caller; nothing is written when
    the fetch fails.
    """

    def __init__(
        self,
        *,
        pool_source_port: PoolSourcePort,
        tier_cache_port: TierCachePort,
        pricing: AssetPricingTable,
        thresholds: TierThresholds,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._pool_source_port = pool_source_port
        self._tier_cache_port = tier_cache_port
        self._pricing = pricing
        self._thresholds = thresholds
        self._clock = clock

    def execute(self) -> MonitorCycleOutput:
        snapshots = self._pool_source_port.fetch_pools()

        classified_at = self._clock()
        classifications = classify_pools(
            snapshots,
            pricing=self._pricing,
            thresholds=self._thresholds,
            classified_at=classified_at,
        )
        stats = self._tier_cache_port.write_cycle(classifications, updated_at=classified_at)
        degraded = sum(1 for item in classifications if item.degraded)

        logger.info(
            "run_monitor_cycle: stored pools=%s tier_1=%s tier_2=%s tier_3=%s degraded=%s pricing=%s",
            stats.total,
            stats.tier_1,
            stats.tier_2,
            stats.tier_3,
            degraded,
            self._pricing.version,
        )
        return MonitorCycleOutput(
            pools_fetched=len(snapshots),
            pools_degraded=degraded,
            stats=stats,
        )
