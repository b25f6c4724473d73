from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pool_tiers.api.deps import build_monitor_scheduler
from pool_tiers.api.routers.health import router as health_router
from pool_tiers.api.routers.pool_tiers import router as pool_tiers_router
from pool_tiers.shared.config import get_settings


logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    app.state.started_at_monotonic = time.monotonic()
    app.state.scheduler = None
    if settings.monitor_enabled:
        scheduler = build_monitor_scheduler()
        scheduler.start()
        app.state.scheduler = scheduler
    else:
        logger.info("main: monitor_disabled serving cached tiers only")
    try:
        yield
    finally:
        if app.state.scheduler is not None:
            app.state.scheduler.stop(timeout=settings.horizon_timeout_seconds + 5)


app = FastAPI(title="Liquidity Pool Tier API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(pool_tiers_router)


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host="0.0.0.0", port=settings.api_port)


if __name__ == "__main__":
    run()
