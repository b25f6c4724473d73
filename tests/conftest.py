from __future__ import annotations

import pytest
from redis import ConnectionError as RedisConnectionError


class FakeClock:
    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePipeline:
    def __init__(self, redis: "FakeRedis"):
        self._redis = redis
        self._commands: list[tuple[str, tuple, dict]] = []

    def __enter__(self) -> "FakePipeline":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        _ = (exc_type, exc, tb)
        self._commands = []

    def __getattr__(self, name: str):
        def _queue(*args, **kwargs):
            self._commands.append((name, args, kwargs))
            return self

        return _queue

    def execute(self) -> list:
        self._redis._check_available()
        self._redis.executed_batches += 1
        results = [getattr(self._redis, name)(*args, **kwargs) for name, args, kwargs in self._commands]
        self._commands = []
        return results


class FakeRedis:
    """In-memory subset of the redis-py client with a controllable clock."""

    def __init__(self, clock: FakeClock | None = None):
        self._clock = clock or FakeClock()
        self._data: dict[str, object] = {}
        self._expires_at: dict[str, float] = {}
        self.available = True
        self.executed_batches = 0

    def _check_available(self) -> None:
        if not self.available:
            raise RedisConnectionError("Connection refused")

    def _purge(self, key: str) -> None:
        expires_at = self._expires_at.get(key)
        if expires_at is not None and expires_at <= self._clock():
            self._data.pop(key, None)
            self._expires_at.pop(key, None)

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        _ = transaction
        return FakePipeline(self)

    def ping(self) -> bool:
        self._check_available()
        return True

    def delete(self, *keys: str) -> int:
        self._check_available()
        removed = 0
        for key in keys:
            self._purge(key)
            if key in self._data:
                removed += 1
            self._data.pop(key, None)
            self._expires_at.pop(key, None)
        return removed

    def expire(self, key: str, seconds: int) -> bool:
        self._check_available()
        self._purge(key)
        if key not in self._data:
            return False
        self._expires_at[key] = self._clock() + seconds
        return True

    def ttl(self, key: str) -> int:
        self._purge(key)
        if key not in self._data:
            return -2
        expires_at = self._expires_at.get(key)
        if expires_at is None:
            return -1
        return int(expires_at - self._clock())

    def hset(self, key: str, mapping: dict) -> int:
        self._check_available()
        self._purge(key)
        bucket = self._data.setdefault(key, {})
        bucket.update({field: str(value) for field, value in mapping.items()})
        return len(mapping)

    def hgetall(self, key: str) -> dict:
        self._check_available()
        self._purge(key)
        return dict(self._data.get(key, {}))

    def sadd(self, key: str, *members: str) -> int:
        self._check_available()
        self._purge(key)
        bucket = self._data.setdefault(key, set())
        before = len(bucket)
        bucket.update(members)
        return len(bucket) - before

    def smembers(self, key: str) -> set:
        self._check_available()
        self._purge(key)
        return set(self._data.get(key, set()))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_redis(clock: FakeClock) -> FakeRedis:
    return FakeRedis(clock)
