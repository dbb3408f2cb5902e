"""Time-bounded response cache for FPL API payloads.

One cache is owned by each FplApiClient instance, so there is no module-level
state shared between clients (or between tests).

- Entries are keyed by a logical request key ("standings:314", "live:18", ...)
- Each fetch passes its own TTL; live data uses the shortest window
- Failed loads are never cached; the exception propagates to the caller
- Concurrent misses on the same key are serialized via asyncio.Lock so only
  one loader hits the API (thundering herd prevention)
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from cachetools import TLRUCache

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 2048


@dataclass(slots=True)
class CacheEntry:
    """A cached payload and the clock time it was fetched at."""

    payload: Any
    fetched_at: float
    ttl: float

    def age(self, now: float) -> float:
        return now - self.fetched_at


def _time_to_use(_key: str, entry: CacheEntry, now: float) -> float:
    """Per-item expiry for TLRUCache: each entry lives for its own TTL."""
    return now + entry.ttl


class ResponseCache:
    """Memoizes async loaders by key with a per-key TTL."""

    def __init__(
        self,
        maxsize: int = DEFAULT_MAX_ENTRIES,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._timer = timer
        self._entries: TLRUCache[str, CacheEntry] = TLRUCache(
            maxsize=maxsize,
            ttu=_time_to_use,
            timer=timer,
        )
        self._locks: dict[str, asyncio.Lock] = {}
        self._hits = 0
        self._misses = 0

    def _lookup(self, key: str, ttl: float) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        # A caller may ask for a shorter window than the entry was stored with
        if entry.age(self._timer()) >= ttl:
            return None
        return entry

    async def fetch(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
        ttl: float,
    ) -> Any:
        """Return the cached payload for key, or load, store and return it.

        Args:
            key: Logical request identity
            loader: Zero-argument coroutine function producing the payload
            ttl: Maximum age in seconds of a cached payload

        Returns:
            The payload object (the same object on a cache hit)

        Raises:
            Whatever the loader raises. Failures are not cached.
        """
        entry = self._lookup(key, ttl)
        if entry is not None:
            self._hits += 1
            logger.debug("Cache hit for %s", key)
            return entry.payload

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Double-check after acquiring lock (another task may have populated)
            entry = self._lookup(key, ttl)
            if entry is not None:
                self._hits += 1
                logger.debug("Cache hit for %s (after lock)", key)
                return entry.payload

            self._misses += 1
            logger.debug("Cache miss for %s", key)
            try:
                payload = await loader()
                self._entries[key] = CacheEntry(
                    payload=payload,
                    fetched_at=self._timer(),
                    ttl=ttl,
                )
            finally:
                # Waiters already hold a reference; later callers get a fresh lock
                if self._locks.get(key) is lock:
                    del self._locks[key]
            return payload

    def clear(self) -> None:
        """Drop every cached entry."""
        self._entries.clear()
        self._locks.clear()

    def stats(self) -> dict[str, Any]:
        """Get cache statistics for monitoring."""
        return {
            "entries": len(self._entries),
            "maxsize": self._entries.maxsize,
            "hits": self._hits,
            "misses": self._misses,
            "pending": len(self._locks),
        }
