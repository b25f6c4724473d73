from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pool_tiers.domain.entities.pool_tier import TierStats


@dataclass(frozen=True)
class GetPoolTierInput:
    pool_id: str


@dataclass(frozen=True)
class ListPoolsByTierInput:
    tier: str


@dataclass(frozen=True)
class MonitorCycleOutput:
    pools_fetched: int
    pools_degraded: int
    stats: TierStats


@dataclass(frozen=True)
class MonitorCycleReport:
    started_at: datetime
    finished_at: datetime
    status: str
    stats: TierStats | None = None
    error: str | None = None


@dataclass(frozen=True)
class HealthOutput:
    status: str
    redis: str
    pools: TierStats
    uptime_seconds: float
    timestamp: datetime
    last_cycle: MonitorCycleReport | None
