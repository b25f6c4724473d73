from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from pool_tiers.api.deps import (
    get_list_pools_by_tier_use_case,
    get_liquidity_stats_use_case,
    get_pool_tier_use_case,
)
from pool_tiers.api.schemas.mappers import to_pool_tier_response, to_tier_stats_response
from pool_tiers.api.schemas.pool_tier import PoolTierResponse, TierStatsResponse
from pool_tiers.application.dto.pool_tier import GetPoolTierInput, ListPoolsByTierInput
from pool_tiers.application.use_cases.get_liquidity_stats import GetLiquidityStatsUseCase
from pool_tiers.application.use_cases.get_pool_tier import GetPoolTierUseCase
from pool_tiers.application.use_cases.list_pools_by_tier import ListPoolsByTierUseCase
from pool_tiers.domain.exceptions import (
    InvalidTierArgumentError,
    PoolNotFoundError,
    StoreUnavailableError,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/pool/{pool_id}/tier", response_model=PoolTierResponse)
def get_pool_tier(
    pool_id: str,
    use_case: GetPoolTierUseCase = Depends(get_pool_tier_use_case),
):
    try:
        result = use_case.execute(GetPoolTierInput(pool_id=pool_id))
    except PoolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        logger.warning("pool_tiers_router: store_unavailable pool=%s detail=%s", pool_id, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return to_pool_tier_response(result)


@router.get("/api/pools/tier/{tier}", response_model=list[PoolTierResponse])
def list_pools_by_tier(
    tier: str,
    use_case: ListPoolsByTierUseCase = Depends(get_list_pools_by_tier_use_case),
):
    try:
        result = use_case.execute(ListPoolsByTierInput(tier=tier))
    except InvalidTierArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        logger.warning("pool_tiers_router: store_unavailable tier=%s detail=%s", tier, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return [to_pool_tier_response(item) for item in result]


@router.get("/api/liquidity-stats", response_model=TierStatsResponse)
def liquidity_stats(
    use_case: GetLiquidityStatsUseCase = Depends(get_liquidity_stats_use_case),
):
    try:
        result = use_case.execute()
    except StoreUnavailableError as exc:
        logger.warning("pool_tiers_router: store_unavailable detail=%s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return to_tier_stats_response(result)
