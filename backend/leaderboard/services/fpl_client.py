"""FPL API client with per-endpoint response caching."""

import asyncio
import logging
from typing import Any

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from leaderboard.config import Settings, get_settings
from leaderboard.services.response_cache import ResponseCache

logger = logging.getLogger(__name__)

# HTTP status codes that should trigger a retry
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def _is_retryable_error(exception: BaseException) -> bool:
    """Check if an error should trigger a retry."""
    if isinstance(exception, (httpx.TimeoutException, httpx.NetworkError)):
        return True
    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code in RETRYABLE_STATUS_CODES
    return False


class FplApiClient:
    """
    Read-only FPL API client.

    Every endpoint goes through the client's own ResponseCache with a TTL
    matched to how volatile the data is:
    - live gameweek stats and event status: shortest
    - standings, picks, bootstrap: medium
    - season history and fixtures: longest

    Concurrency is bounded by a semaphore; transient failures (timeouts,
    429/5xx) are retried with exponential backoff.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        cache: ResponseCache | None = None,
        max_concurrent: int | None = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Application settings (defaults to get_settings())
            cache: Response cache to use (a fresh one per client by default)
            max_concurrent: Maximum concurrent upstream requests
        """
        self.settings = settings or get_settings()
        self.cache = cache or ResponseCache()
        self.semaphore = asyncio.Semaphore(
            max_concurrent or self.settings.max_concurrent_requests
        )
        self._lock = asyncio.Lock()
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client (lazy initialization, coroutine-safe)."""
        if self._client is None:
            async with self._lock:
                if self._client is None:  # Double-check after acquiring lock
                    self._client = httpx.AsyncClient(
                        base_url=self.settings.fpl_api_base_url,
                        timeout=self.settings.request_timeout,
                        headers={"User-Agent": self.settings.user_agent},
                    )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release resources (coroutine-safe)."""
        async with self._lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None

    async def __aenter__(self) -> "FplApiClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Exit async context manager and close client."""
        await self.close()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        retry=retry_if_exception(_is_retryable_error),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
    async def _get(self, path: str) -> Any:
        """Make a bounded GET request with retries and return parsed JSON."""
        async with self.semaphore:
            client = await self._get_client()
            logger.info(f"Fetching {path} from FPL API")
            response = await client.get(path)
            response.raise_for_status()
            return response.json()

    async def _cached_get(self, key: str, path: str, ttl: int) -> Any:
        return await self.cache.fetch(key, lambda: self._get(path), ttl)

    async def get_league_standings(self, league_id: int) -> dict[str, Any]:
        """Classic league standings (first page) plus new_entries for pre-season."""
        return await self._cached_get(
            f"standings:{league_id}",
            f"/leagues-classic/{league_id}/standings/",
            self.settings.cache_ttl_standings,
        )

    async def get_event_status(self) -> dict[str, Any]:
        """Event processing status; status[].event is the current gameweek."""
        return await self._cached_get(
            "event_status", "/event-status/", self.settings.cache_ttl_event_status
        )

    async def get_fixtures(self) -> list[dict[str, Any]]:
        """All fixtures for the current season."""
        return await self._cached_get(
            "fixtures", "/fixtures/", self.settings.cache_ttl_fixtures
        )

    async def get_bootstrap_static(self) -> dict[str, Any]:
        """Players, teams and events. Used as the player directory."""
        return await self._cached_get(
            "bootstrap", "/bootstrap-static/", self.settings.cache_ttl_bootstrap
        )

    async def get_entry_history(self, manager_id: int) -> dict[str, Any]:
        """Manager season history; current[] holds per-gameweek points."""
        return await self._cached_get(
            f"history:{manager_id}",
            f"/entry/{manager_id}/history/",
            self.settings.cache_ttl_history,
        )

    async def get_entry_picks(self, manager_id: int, gameweek: int) -> dict[str, Any]:
        """Manager's 15 picks for a gameweek."""
        return await self._cached_get(
            f"picks:{manager_id}:{gameweek}",
            f"/entry/{manager_id}/event/{gameweek}/picks/",
            self.settings.cache_ttl_picks,
        )

    async def get_event_live(self, gameweek: int) -> dict[str, Any]:
        """Live per-player stats for a gameweek."""
        return await self._cached_get(
            f"live:{gameweek}",
            f"/event/{gameweek}/live/",
            self.settings.cache_ttl_live,
        )
