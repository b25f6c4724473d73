from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from pool_tiers.application.use_cases.run_monitor_cycle import RunMonitorCycleUseCase
from pool_tiers.domain.entities.pool_tier import PoolReserve, PoolSnapshot, Tier, TierStats
from pool_tiers.domain.exceptions import SourceUnavailableError, StoreUnavailableError
from pool_tiers.domain.services.asset_pricing import AssetPricingTable
from pool_tiers.domain.services.tier_classification import TierThresholds
from pool_tiers.infrastructure.cache.redis_tier_cache import RedisTierCacheRepository


CYCLE_AT = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _snapshot(pool_id: str, asset: str, amount: str) -> PoolSnapshot:
    return PoolSnapshot(
        pool_id=pool_id,
        reserves=(PoolReserve(asset=asset, amount=amount),),
        total_accounts=1,
        total_shares="1",
        last_modified=None,
    )


class FakePoolSource:
    def __init__(self, snapshots: list[PoolSnapshot] | None = None, *, error: Exception | None = None):
        self._snapshots = snapshots or []
        self._error = error
        self.calls = 0

    def fetch_pools(self) -> list[PoolSnapshot]:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return list(self._snapshots)


class FakeTierCache:
    def __init__(self, *, error: Exception | None = None):
        self._error = error
        self.written: list = []

    def write_cycle(self, classifications, *, updated_at: datetime) -> TierStats:
        if self._error is not None:
            raise self._error
        self.written.append((list(classifications), updated_at))
        return TierStats(
            tier_1=sum(1 for item in classifications if item.tier is Tier.TIER_1),
            tier_2=sum(1 for item in classifications if item.tier is Tier.TIER_2),
            tier_3=sum(1 for item in classifications if item.tier is Tier.TIER_3),
            total=len(classifications),
            last_update=updated_at,
        )


def _use_case(pool_source, tier_cache) -> RunMonitorCycleUseCase:
    return RunMonitorCycleUseCase(
        pool_source_port=pool_source,
        tier_cache_port=tier_cache,
        pricing=AssetPricingTable(),
        thresholds=TierThresholds(),
        clock=lambda: CYCLE_AT,
    )


REFERENCE_POOLS = [
    _snapshot("P1", "native", "10000000"),
    _snapshot("P2", "USDC-ISSUER", "500000"),
    _snapshot("P3", "XYZ", "1000"),
]


def test_cycle_classifies_and_writes_every_pool():
    cache = FakeTierCache()

    output = _use_case(FakePoolSource(REFERENCE_POOLS), cache).execute()

    classifications, updated_at = cache.written[0]
    assert updated_at == CYCLE_AT
    assert [(item.pool_id, item.tvl, item.tier) for item in classifications] == [
        ("P1", Decimal("1200000"), Tier.TIER_1),
        ("P2", Decimal("500000"), Tier.TIER_2),
        ("P3", Decimal("100"), Tier.TIER_3),
    ]
    assert output.pools_fetched == 3
    assert output.pools_degraded == 0
    assert (output.stats.tier_1, output.stats.tier_2, output.stats.tier_3, output.stats.total) == (
        1,
        1,
        1,
        3,
    )


def test_cycle_with_malformed_pool_still_writes_three_records(fake_redis):
    repo = RedisTierCacheRepository(fake_redis)
    pools = [
        _snapshot("P1", "native", "10000000"),
        _snapshot("P2", "USDC-ISSUER", "five hundred"),
        _snapshot("P3", "XYZ", "1000"),
    ]

    output = _use_case(FakePoolSource(pools), repo).execute()

    assert output.stats.total == 3
    assert output.pools_degraded == 1
    degraded = repo.get_classification(pool_id="P2")
    assert degraded.tier is Tier.TIER_3
    assert degraded.tvl == Decimal("0")
    assert degraded.error


def test_cycle_end_to_end_against_cache(fake_redis):
    repo = RedisTierCacheRepository(fake_redis)

    _use_case(FakePoolSource(REFERENCE_POOLS), repo).execute()

    assert [item.pool_id for item in repo.list_by_tier(tier=Tier.TIER_1)] == ["P1"]
    assert [item.pool_id for item in repo.list_by_tier(tier=Tier.TIER_2)] == ["P2"]
    assert [item.pool_id for item in repo.list_by_tier(tier=Tier.TIER_3)] == ["P3"]
    stats = repo.get_aggregate()
    assert (stats.tier_1, stats.tier_2, stats.tier_3, stats.total) == (1, 1, 1, 3)


def test_source_failure_aborts_before_write():
    cache = FakeTierCache()
    use_case = _use_case(FakePoolSource(error=SourceUnavailableError("Horizon API error: 503")), cache)

    with pytest.raises(SourceUnavailableError):
        use_case.execute()
    assert cache.written == []


def test_store_failure_propagates():
    use_case = _use_case(
        FakePoolSource(REFERENCE_POOLS),
        FakeTierCache(error=StoreUnavailableError("down")),
    )

    with pytest.raises(StoreUnavailableError):
        use_case.execute()
