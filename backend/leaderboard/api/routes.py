"""API route registration."""

from fastapi import APIRouter

from leaderboard.api import leaderboard, proxy, session

router = APIRouter()

router.include_router(leaderboard.router)
router.include_router(session.router)
# Catch-all relay must come after the /api/v1 routers
router.include_router(proxy.router)
