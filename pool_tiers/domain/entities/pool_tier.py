from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


NATIVE_ASSET = "native"


class Tier(str, Enum):
    TIER_1 = "TIER_1"
    TIER_2 = "TIER_2"
    TIER_3 = "TIER_3"


@dataclass(frozen=True)
class PoolReserve:
    asset: str | None
    amount: str | None


@dataclass(frozen=True)
class PoolSnapshot:
    pool_id: str
    reserves: tuple[PoolReserve, ...]
    total_accounts: int
    total_shares: str
    last_modified: str | None


@dataclass(frozen=True)
class PoolTierClassification:
    pool_id: str
    tvl: Decimal
    tier: Tier
    reserves: tuple[PoolReserve, ...]
    total_accounts: int
    total_shares: str
    last_modified: str | None
    timestamp: datetime
    error: str | None = None

    @property
    def degraded(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class TierStats:
    tier_1: int
    tier_2: int
    tier_3: int
    total: int
    last_update: datetime | None

    @classmethod
    def empty(cls) -> "TierStats":
        return cls(tier_1=0, tier_2=0, tier_3=0, total=0, last_update=None)
