from __future__ import annotations

import json
import os
from dataclasses import dataclass
from decimal import Decimal

from dotenv import load_dotenv

from pool_tiers.domain.exceptions import ConfigurationError


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _json(name: str) -> dict:
    value = _env(name)
    if not value:
        return {}
    return json.loads(value)


def _bool(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _csv(name: str, default: str) -> tuple[str, ...]:
    value = _env(name, default) or ""
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _monitoring_interval_seconds() -> float:
    seconds = _env("MONITORING_INTERVAL_SECONDS")
    if seconds:
        return float(seconds)
    legacy_ms = _env("MONITORING_INTERVAL")
    if legacy_ms:
        return float(legacy_ms) / 1000.0
    return 300.0


@dataclass(frozen=True)
class Settings:
    horizon_url: str
    horizon_page_limit: int
    horizon_max_pages: int
    horizon_timeout_seconds: float
    monitoring_interval_seconds: float
    monitor_enabled: bool
    redis_url: str
    redis_host: str
    redis_port: int
    redis_db: int
    redis_password: str
    redis_socket_timeout_seconds: float
    api_port: int
    log_level: str
    tier_1_min_tvl_usd: Decimal
    tier_2_min_tvl_usd: Decimal
    native_asset_usd_multiplier: Decimal
    other_asset_usd_multiplier: Decimal
    stablecoin_asset_markers: tuple[str, ...]
    asset_price_overrides: dict


def get_settings() -> Settings:
    settings = Settings(
        horizon_url=_env("HORIZON_URL", "https://horizon-testnet.stellar.org"),
        horizon_page_limit=int(_env("HORIZON_PAGE_LIMIT", "200")),
        horizon_max_pages=int(_env("HORIZON_MAX_PAGES", "1")),
        horizon_timeout_seconds=float(_env("HORIZON_TIMEOUT_SECONDS", "10")),
        monitoring_interval_seconds=_monitoring_interval_seconds(),
        monitor_enabled=_bool("MONITOR_ENABLED", True),
        redis_url=_env("REDIS_URL", ""),
        redis_host=_env("REDIS_HOST", "localhost"),
        redis_port=int(_env("REDIS_PORT", "6379")),
        redis_db=int(_env("REDIS_DB", "0")),
        redis_password=_env("REDIS_PASSWORD", ""),
        redis_socket_timeout_seconds=float(_env("REDIS_SOCKET_TIMEOUT_SECONDS", "5")),
        api_port=int(_env("LIQUIDITY_API_PORT", "3002")),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
        tier_1_min_tvl_usd=Decimal(_env("TIER_1_MIN_TVL_USD", "1000000")),
        tier_2_min_tvl_usd=Decimal(_env("TIER_2_MIN_TVL_USD", "250000")),
        native_asset_usd_multiplier=Decimal(_env("NATIVE_ASSET_USD_MULTIPLIER", "0.12")),
        other_asset_usd_multiplier=Decimal(_env("OTHER_ASSET_USD_MULTIPLIER", "0.1")),
        stablecoin_asset_markers=_csv("STABLECOIN_ASSET_MARKERS", "USDC"),
        asset_price_overrides=_json("ASSET_PRICE_OVERRIDES"),
    )
    if not 1 <= settings.horizon_page_limit <= 200:
        raise ConfigurationError("HORIZON_PAGE_LIMIT must be between 1 and 200.")
    if settings.horizon_max_pages < 1:
        raise ConfigurationError("HORIZON_MAX_PAGES must be >= 1.")
    if settings.monitoring_interval_seconds <= 0:
        raise ConfigurationError("MONITORING_INTERVAL_SECONDS must be positive.")
    return settings
