from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class PoolReserveResponse(BaseModel):
    asset: str | None
    amount: str | None


class PoolTierResponse(BaseModel):
    pool_id: str
    tier: str
    tvl: Decimal
    timestamp: datetime
    total_accounts: int
    total_shares: str
    last_modified: str | None = None
    reserves: list[PoolReserveResponse]
    error: str | None = None


class TierStatsResponse(BaseModel):
    TIER_1: int
    TIER_2: int
    TIER_3: int
    total: int
    last_update: datetime | None = None
