from __future__ import annotations

from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from pool_tiers.api.deps import get_health_use_case
from pool_tiers.api.schemas.health import HealthResponse, LastCycleResponse, ServiceInfoResponse
from pool_tiers.api.schemas.mappers import to_tier_stats_response
from pool_tiers.application.use_cases.get_health import GetHealthUseCase
from pool_tiers.domain.exceptions import StoreUnavailableError

router = APIRouter()
logger = logging.getLogger(__name__)

SERVICE_VERSION = "2.0.0"


@router.get("/", response_model=ServiceInfoResponse)
def service_info():
    return ServiceInfoResponse(
        status="Stellar Liquidity Pool Tier Monitor",
        version=SERVICE_VERSION,
        timestamp=datetime.now(timezone.utc),
        endpoints={
            "health": "/health",
            "stats": "/api/liquidity-stats",
            "tierPools": "/api/pools/tier/{tier}",
            "poolTier": "/api/pool/{pool_id}/tier",
        },
    )


@router.get("/health", response_model=HealthResponse)
def health(use_case: GetHealthUseCase = Depends(get_health_use_case)):
    try:
        result = use_case.execute()
    except StoreUnavailableError as exc:
        logger.warning("health_router: store_unavailable detail=%s", exc)
        return JSONResponse(
            status_code=500,
            content={"status": "unhealthy", "error": str(exc)},
        )

    last_cycle = None
    if result.last_cycle is not None:
        last_cycle = LastCycleResponse(
            started_at=result.last_cycle.started_at,
            finished_at=result.last_cycle.finished_at,
            status=result.last_cycle.status,
            error=result.last_cycle.error,
        )
    return HealthResponse(
        status=result.status,
        redis=result.redis,
        pools=to_tier_stats_response(result.pools),
        uptime=result.uptime_seconds,
        timestamp=result.timestamp,
        last_cycle=last_cycle,
    )
