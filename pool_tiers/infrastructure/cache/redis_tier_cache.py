from __future__ import annotations

from datetime import datetime
from decimal import InvalidOperation
import logging
from typing import Sequence

from redis import Redis, RedisError

from pool_tiers.domain.entities.pool_tier import PoolTierClassification, Tier, TierStats
from pool_tiers.domain.exceptions import StoreUnavailableError
from pool_tiers.domain.services.tier_classification import summarize_tiers
from pool_tiers.infrastructure.cache.mappers.pool_tier_mapper import (
    map_classification_to_hash,
    map_hash_to_classification,
    map_hash_to_stats,
    map_stats_to_hash,
)


logger = logging.getLogger(__name__)


CACHE_TTL_SECONDS = 86400
POOL_KEY_PREFIX = "liquidity_pool:"
STATS_KEY = "liquidity_pool_stats"


def pool_key(pool_id: str) -> str:
    return f"{POOL_KEY_PREFIX}{pool_id}"


def tier_members_key(tier: Tier) -> str:
    return f"tier:{tier.value}:pools"


class RedisTierCacheRepository:
    """Latest-cycle tier classifications stored in Redis.

    Layout: one hash per pool, one id set per tier and one aggregate hash,
    every key expiring after ``ttl_seconds``. A cycle is written in a single
    MULTI/EXEC pipeline; readers see either the previous cycle or the new one.
    """

    def __init__(self, redis_client: Redis, *, ttl_seconds: int = CACHE_TTL_SECONDS):
        self._redis = redis_client
        self._ttl_seconds = ttl_seconds

    def write_cycle(
        self,
        classifications: Sequence[PoolTierClassification],
        *,
        updated_at: datetime,
    ) -> TierStats:
        stats = summarize_tiers(classifications, updated_at=updated_at)
        members: dict[Tier, list[str]] = {tier: [] for tier in Tier}
        for item in classifications:
            members[item.tier].append(item.pool_id)

        try:
            with self._redis.pipeline(transaction=True) as pipe:
                pipe.delete(*(tier_members_key(tier) for tier in Tier))
                for item in classifications:
                    key = pool_key(item.pool_id)
                    pipe.delete(key)
                    pipe.hset(key, mapping=map_classification_to_hash(item))
                    pipe.expire(key, self._ttl_seconds)
                for tier, pool_ids in members.items():
                    if not pool_ids:
                        continue
                    pipe.sadd(tier_members_key(tier), *pool_ids)
                    pipe.expire(tier_members_key(tier), self._ttl_seconds)
                pipe.delete(STATS_KEY)
                pipe.hset(STATS_KEY, mapping=map_stats_to_hash(stats))
                pipe.expire(STATS_KEY, self._ttl_seconds)
                pipe.execute()
        except RedisError as exc:
            raise StoreUnavailableError(f"Failed to store tier cycle: {exc}") from exc

        logger.info(
            "redis_tier_cache: cycle_written pools=%s ttl_seconds=%s",
            stats.total,
            self._ttl_seconds,
        )
        return stats

    def get_classification(self, *, pool_id: str) -> PoolTierClassification | None:
        try:
            row = self._redis.hgetall(pool_key(pool_id))
        except RedisError as exc:
            raise StoreUnavailableError(f"Failed to read pool {pool_id}: {exc}") from exc
        return self._map_row(pool_id, row)

    def list_by_tier(self, *, tier: Tier) -> list[PoolTierClassification]:
        try:
            pool_ids = sorted(self._redis.smembers(tier_members_key(tier)))
            if not pool_ids:
                return []
            with self._redis.pipeline(transaction=False) as pipe:
                for pool_id in pool_ids:
                    pipe.hgetall(pool_key(pool_id))
                rows = pipe.execute()
        except RedisError as exc:
            raise StoreUnavailableError(f"Failed to list pools for {tier.value}: {exc}") from exc

        result: list[PoolTierClassification] = []
        for pool_id, row in zip(pool_ids, rows):
            item = self._map_row(pool_id, row)
            if item is None or item.tier is not tier:
                continue
            result.append(item)
        result.sort(key=lambda item: (-item.tvl, item.pool_id))
        return result

    def get_aggregate(self) -> TierStats:
        try:
            row = self._redis.hgetall(STATS_KEY)
        except RedisError as exc:
            raise StoreUnavailableError(f"Failed to read tier stats: {exc}") from exc
        try:
            return map_hash_to_stats(row)
        except ValueError as exc:
            logger.warning(
                "redis_tier_cache: unreadable_record key=%s error=%s",
                STATS_KEY,
                exc,
            )
            return TierStats.empty()

    def ping(self) -> bool:
        try:
            return bool(self._redis.ping())
        except RedisError as exc:
            raise StoreUnavailableError(f"Redis ping failed: {exc}") from exc

    def _map_row(self, pool_id: str, row) -> PoolTierClassification | None:
        if not row:
            return None
        try:
            return map_hash_to_classification(pool_id, row)
        except (InvalidOperation, KeyError, ValueError) as exc:
            logger.warning(
                "redis_tier_cache: unreadable_record pool=%s error=%s",
                pool_id,
                exc,
            )
            return None
