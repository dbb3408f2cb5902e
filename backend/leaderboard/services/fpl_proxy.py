"""FPL API relay - forwards browser requests upstream to avoid CORS blocks."""

import logging
from typing import Any

import httpx

from leaderboard.config import Settings, get_settings

logger = logging.getLogger(__name__)


class RelayError(Exception):
    """Raised when an upstream request could not be relayed."""


class FPLProxyService:
    """
    Pass-through proxy for FPL API requests.

    - No caching: responses are returned exactly as the upstream sent them
    - Any failure (network, non-2xx, invalid JSON) becomes a RelayError
    - User-Agent header to avoid blocks
    """

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self._client = httpx.AsyncClient(
            base_url=settings.fpl_api_base_url,
            timeout=settings.request_timeout,
            headers={"User-Agent": settings.user_agent},
        )

    async def forward(self, path: str, params: list[tuple[str, str]] | None = None) -> Any:
        """GET path from the FPL API and return the decoded JSON body."""
        upstream_path = "/" + path.lstrip("/")
        try:
            logger.info(f"Proxying request to {upstream_path}")
            response = await self._client.get(upstream_path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error relaying {upstream_path}: {e.response.status_code}")
            raise RelayError(f"Upstream returned {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"Request error relaying {upstream_path}: {e}")
            raise RelayError(str(e)) from e
        except ValueError as e:
            logger.error(f"Invalid JSON relaying {upstream_path}: {e}")
            raise RelayError("Upstream response was not JSON") from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
