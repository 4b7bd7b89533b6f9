"""FastAPI application entry point for raceinfo."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from raceinfo import __version__
from raceinfo.api import races, tools
from raceinfo.config import settings
from raceinfo.scheduler.manager import SchedulerManager
from raceinfo.snapshot.cache import close_snapshot_cache, init_snapshot_cache
from raceinfo.storage import create_store

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    # Startup
    logger.info("Starting raceinfo...")

    store = create_store(settings)
    cache = init_snapshot_cache(store, settings)
    logger.info(
        f"Snapshot cache ready for {settings.blob_backend} bucket '{settings.bucket}' "
        f"({settings.races_key}, {settings.odds_key})"
    )

    app.state.scheduler = None
    if not settings.disable_background:
        scheduler_manager = SchedulerManager(settings.tz)
        await scheduler_manager.start()
        scheduler_manager.setup_daily_refresh(
            cache, hour=settings.refresh_hour, minute=settings.refresh_minute
        )
        app.state.scheduler = scheduler_manager
        logger.info(
            f"Scheduler started - snapshot refresh daily at "
            f"{settings.refresh_hour:02d}:{settings.refresh_minute:02d} {settings.timezone}"
        )

    yield

    # Shutdown
    logger.info("Shutting down raceinfo...")
    if app.state.scheduler:
        await app.state.scheduler.stop()
    await close_snapshot_cache()


# Create FastAPI app
app = FastAPI(
    title="raceinfo",
    description="Race meeting, form and odds answers for agents and REST clients",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(GZipMiddleware, minimum_size=500)

# Include routers
app.include_router(races.router, prefix="/api/races", tags=["races"])
app.include_router(tools.router, prefix="/api/tools", tags=["tools"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("raceinfo.main:app", host="0.0.0.0", port=8000)
