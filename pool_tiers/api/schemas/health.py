from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from pool_tiers.api.schemas.pool_tier import TierStatsResponse


class LastCycleResponse(BaseModel):
    started_at: datetime
    finished_at: datetime
    status: str
    error: str | None = None


class HealthResponse(BaseModel):
    status: str
    redis: str
    pools: TierStatsResponse
    uptime: float
    timestamp: datetime
    last_cycle: LastCycleResponse | None = None


class ServiceInfoResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime
    endpoints: dict[str, str]
