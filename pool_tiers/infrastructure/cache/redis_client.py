from __future__ import annotations

from dataclasses import dataclass

from redis import Redis


@dataclass(frozen=True)
class RedisClientSettings:
    url: str = ""
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: str = ""
    socket_timeout_seconds: float = 5.0


def create_redis_client(settings: RedisClientSettings) -> Redis:
    if settings.url:
        return Redis.from_url(
            settings.url,
            decode_responses=True,
            socket_timeout=settings.socket_timeout_seconds,
            socket_connect_timeout=settings.socket_timeout_seconds,
        )
    return Redis(
        host=settings.host,
        port=settings.port,
        db=settings.db,
        password=settings.password or None,
        decode_responses=True,
        socket_timeout=settings.socket_timeout_seconds,
        socket_connect_timeout=settings.socket_timeout_seconds,
    )
