from __future__ import annotations

from typing import Protocol

from pool_tiers.domain.entities.pool_tier import PoolSnapshot


class PoolSourcePort(Protocol):
    def fetch_pools(self) -> list[PoolSnapshot]:
        ...
