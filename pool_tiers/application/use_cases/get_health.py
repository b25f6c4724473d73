from __future__ import annotations

from datetime import datetime, timezone
import time
from typing import Callable

from pool_tiers.application.dto.pool_tier import HealthOutput, MonitorCycleReport
from pool_tiers.application.ports.tier_cache_port import TierCachePort
from pool_tiers.domain.exceptions import StoreUnavailableError


class GetHealthUseCase:
    def __init__(
        self,
        *,
        tier_cache_port: TierCachePort,
        started_at_monotonic: float,
        last_cycle_provider: Callable[[], MonitorCycleReport | None] | None = None,
    ):
        self._tier_cache_port = tier_cache_port
        self._started_at_monotonic = started_at_monotonic
        self._last_cycle_provider = last_cycle_provider

    def execute(self) -> HealthOutput:
        if not self._tier_cache_port.ping():
            raise StoreUnavailableError("Redis did not answer PING.")
        stats = self._tier_cache_port.get_aggregate()
        last_cycle = self._last_cycle_provider() if self._last_cycle_provider else None
        return HealthOutput(
            status="healthy",
            redis="connected",
            pools=stats,
            uptime_seconds=max(0.0, time.monotonic() - self._started_at_monotonic),
            timestamp=datetime.now(timezone.utc),
            last_cycle=last_cycle,
        )
