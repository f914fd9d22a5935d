"""
In-memory TTL cache for upstream metric fetches.

Single-key expiry, no eviction and no locking: the service runs as one
long-lived process, so concurrent misses on the same key may trigger
duplicate fetches.
"""

import logging
import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    data: T
    cached_at: float
    expires_at: float


@dataclass
class CacheResult(Generic[T]):
    """A cached value as seen by callers."""
    data: T
    is_stale: bool
    cached_at: datetime


class MemoryCache:
    """Dictionary-backed cache with per-key TTL."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._store: Dict[str, CacheEntry[Any]] = {}
        self._clock = clock

    def get(self, key: str) -> Optional[CacheResult[Any]]:
        """Return the entry for key, flagged stale once past its expiry."""
        entry = self._store.get(key)
        if entry is None:
            return None
        return CacheResult(
            data=entry.data,
            is_stale=self._clock() >= entry.expires_at,
            cached_at=datetime.fromtimestamp(entry.cached_at, tz=timezone.utc),
        )

    def set(self, key: str, data: Any, ttl_seconds: float) -> None:
        now = self._clock()
        self._store[key] = CacheEntry(data=data, cached_at=now, expires_at=now + ttl_seconds)

    async def get_or_fetch(
        self,
        key: str,
        fetcher: Callable[[], Awaitable[T]],
        ttl_seconds: float,
    ) -> CacheResult[T]:
        """
        Return a fresh cached value, or fetch and store a new one.

        When the fetch fails and an expired value is still held, that value is
        returned with ``is_stale=True``. Without any cached value the fetch
        error propagates.
        """
        cached = self.get(key)
        if cached is not None and not cached.is_stale:
            return cached

        try:
            data = await fetcher()
        except Exception as exc:
            if cached is None:
                raise
            logger.warning(
                f'Cache fetch failed for key "{key}", returning stale data: {exc}',
                extra={"cache_key": key},
            )
            return replace(cached, is_stale=True)

        self.set(key, data, ttl_seconds)
        return CacheResult(
            data=data,
            is_stale=False,
            cached_at=datetime.fromtimestamp(self._store[key].cached_at, tz=timezone.utc),
        )

    def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    def clear(self) -> None:
        self._store.clear()


# Process-wide instance
cache = MemoryCache()
