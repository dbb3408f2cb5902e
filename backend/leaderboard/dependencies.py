"""Shared FastAPI dependencies for API routes.

Each dependency returns a process-wide instance created on first use. Tests
swap them out with app.dependency_overrides.
"""

from functools import lru_cache

from leaderboard.config import get_settings
from leaderboard.services.fpl_client import FplApiClient
from leaderboard.services.fpl_proxy import FPLProxyService
from leaderboard.services.leaderboard import LeaderboardService
from leaderboard.services.session import AutoRefresher, LeaderboardSession, LeagueStore


@lru_cache
def get_fpl_client() -> FplApiClient:
    """Shared FPL client; its response cache is shared by every request."""
    return FplApiClient(get_settings())


@lru_cache
def get_leaderboard_service() -> LeaderboardService:
    return LeaderboardService(get_fpl_client())


@lru_cache
def get_session() -> LeaderboardSession:
    """The leaderboard session, remembering its league in the league store."""
    settings = get_settings()
    return LeaderboardSession(
        get_leaderboard_service(),
        store=LeagueStore(settings.league_store_path),
    )


@lru_cache
def get_auto_refresher() -> AutoRefresher:
    return AutoRefresher(get_session(), get_settings().auto_refresh_seconds)


@lru_cache
def get_proxy_service() -> FPLProxyService:
    return FPLProxyService(get_settings())
