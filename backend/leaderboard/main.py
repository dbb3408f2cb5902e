"""Main FastAPI application entry point."""

import logging
from typing import Any

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from leaderboard.api.routes import router
from leaderboard.config import get_settings
from leaderboard.dependencies import (
    get_auto_refresher,
    get_fpl_client,
    get_proxy_service,
    get_session,
)
from leaderboard.services.fpl_client import FplApiClient

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="FPL League Leaderboard",
    description="Gameweek, monthly and overall leaderboards for FPL mini-leagues",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/health/cache")
async def cache_stats(client: FplApiClient = Depends(get_fpl_client)) -> dict[str, Any]:
    """Response cache statistics for the shared FPL client."""
    return client.cache.stats()


@app.on_event("startup")
async def startup_event() -> None:
    """Restore the stored league and start auto-refresh."""
    logger.info("Starting FPL League Leaderboard")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"FPL API base: {settings.fpl_api_base_url}")

    await get_session().restore()
    get_auto_refresher().start()


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """Stop auto-refresh and close HTTP clients."""
    logger.info("Shutting down FPL League Leaderboard")
    await get_auto_refresher().stop()
    await get_fpl_client().close()
    await get_proxy_service().close()
