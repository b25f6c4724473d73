from __future__ import annotations

from functools import lru_cache
import time

from fastapi import Request
from redis import Redis

from pool_tiers.application.monitor_scheduler import MonitorScheduler
from pool_tiers.application.use_cases.get_health import GetHealthUseCase
from pool_tiers.application.use_cases.get_liquidity_stats import GetLiquidityStatsUseCase
from pool_tiers.application.use_cases.get_pool_tier import GetPoolTierUseCase
from pool_tiers.application.use_cases.list_pools_by_tier import ListPoolsByTierUseCase
from pool_tiers.application.use_cases.run_monitor_cycle import RunMonitorCycleUseCase
from pool_tiers.domain.services.asset_pricing import AssetPricingTable, build_pricing_table
from pool_tiers.domain.services.tier_classification import TierThresholds
from pool_tiers.infrastructure.cache.redis_client import RedisClientSettings, create_redis_client
from pool_tiers.infrastructure.cache.redis_tier_cache import RedisTierCacheRepository
from pool_tiers.infrastructure.clients.horizon_client import (
    HorizonClientSettings,
    HorizonPoolSourceClient,
)
from pool_tiers.shared.config import get_settings


@lru_cache(maxsize=1)
def _get_redis_client() -> Redis:
    settings = get_settings()
    return create_redis_client(
        RedisClientSettings(
            url=settings.redis_url,
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
            socket_timeout_seconds=settings.redis_socket_timeout_seconds,
        )
    )


@lru_cache(maxsize=1)
def _get_horizon_client() -> HorizonPoolSourceClient:
    settings = get_settings()
    return HorizonPoolSourceClient(
        HorizonClientSettings(
            horizon_url=settings.horizon_url,
            page_limit=settings.horizon_page_limit,
            max_pages=settings.horizon_max_pages,
            timeout_seconds=settings.horizon_timeout_seconds,
        )
    )


def _get_pricing_table() -> AssetPricingTable:
    settings = get_settings()
    return build_pricing_table(
        native_multiplier=settings.native_asset_usd_multiplier,
        other_multiplier=settings.other_asset_usd_multiplier,
        stablecoin_markers=settings.stablecoin_asset_markers,
        overrides=settings.asset_price_overrides,
    )


def _get_tier_thresholds() -> TierThresholds:
    settings = get_settings()
    return TierThresholds(
        tier_1_min_tvl=settings.tier_1_min_tvl_usd,
        tier_2_min_tvl=settings.tier_2_min_tvl_usd,
    )


def get_tier_cache_repository() -> RedisTierCacheRepository:
    return RedisTierCacheRepository(_get_redis_client())


def build_monitor_cycle_use_case() -> RunMonitorCycleUseCase:
    return RunMonitorCycleUseCase(
        pool_source_port=_get_horizon_client(),
        tier_cache_port=get_tier_cache_repository(),
        pricing=_get_pricing_table(),
        thresholds=_get_tier_thresholds(),
    )


def build_monitor_scheduler() -> MonitorScheduler:
    settings = get_settings()
    return MonitorScheduler(
        cycle_use_case=build_monitor_cycle_use_case(),
        interval_seconds=settings.monitoring_interval_seconds,
    )


def get_pool_tier_use_case() -> GetPoolTierUseCase:
    return GetPoolTierUseCase(tier_cache_port=get_tier_cache_repository())


def get_list_pools_by_tier_use_case() -> ListPoolsByTierUseCase:
    return ListPoolsByTierUseCase(tier_cache_port=get_tier_cache_repository())


def get_liquidity_stats_use_case() -> GetLiquidityStatsUseCase:
    return GetLiquidityStatsUseCase(tier_cache_port=get_tier_cache_repository())


def get_health_use_case(request: Request) -> GetHealthUseCase:
    scheduler: MonitorScheduler | None = getattr(request.app.state, "scheduler", None)
    return GetHealthUseCase(
        tier_cache_port=get_tier_cache_repository(),
        started_at_monotonic=getattr(request.app.state, "started_at_monotonic", time.monotonic()),
        last_cycle_provider=(lambda: scheduler.last_cycle) if scheduler is not None else None,
    )
