"""
Caching utilities for the Fundi feeds engine.

Provides two caches:

- StalenessCache: in-memory, time-bounded cache for slowly changing
  reference lists (categories, skills, locations). Stale values are kept
  so that a failed refresh can fall back to them.
- DiskCache: small persistent key/value store used for data that must
  survive restarts, such as recent search terms. Uses the diskcache
  library for reliable, process-safe storage.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Awaitable, Callable, Generic, TypeVar

import diskcache

from fundi_feeds.lib import logs

LOG = logs.logger(__file__)

T = TypeVar("T")

DEFAULT_TTL = timedelta(minutes=5)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """
    A cached value together with the time it was fetched.

    Attributes:
        value: The cached value.
        updated_at: When the value was last fetched successfully.
    """

    value: T
    updated_at: datetime

    def is_stale(self, now: datetime, ttl: timedelta) -> bool:
        """Return True once more than ``ttl`` has elapsed since the fetch."""
        return now - self.updated_at > ttl


class StalenessCache:
    """
    Time-bounded cache with graceful degradation.

    ``get_or_fetch`` serves the cached value while it is fresh, otherwise
    calls the fetch coroutine. When that fetch fails and an older value is
    available, the older value is returned instead of the error.

    Callers requesting the same key at the same time are serialised behind
    a per-key lock; the ones that wait find the freshly stored value and do
    not fetch again.

    Attributes:
        ttl: Maximum age of a fresh entry.
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry[Any]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def peek(self, key: str) -> CacheEntry[Any] | None:
        """Return the entry for ``key`` regardless of its age."""
        return self._entries.get(key)

    def is_fresh(self, key: str) -> bool:
        """Return True if ``key`` holds a value younger than the TTL."""
        entry = self._entries.get(key)
        return entry is not None and not entry.is_stale(self._clock(), self.ttl)

    def set(self, key: str, value: Any) -> CacheEntry[Any]:
        """Store ``value`` under ``key`` stamped with the current time."""
        entry = CacheEntry(value=value, updated_at=self._clock())
        self._entries[key] = entry
        return entry

    def invalidate(self, key: str) -> None:
        """Drop ``key`` so the next lookup fetches."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    async def get_or_fetch(
        self,
        key: str,
        fetch: Callable[[], Awaitable[T]],
        force: bool = False,
    ) -> T:
        """
        Return the cached value for ``key`` or fetch a new one.

        Args:
            key: Cache key.
            fetch: Coroutine factory producing a fresh value.
            force: Skip the TTL check and always fetch.

        Returns:
            The fresh, cached, or (after a failed fetch) previous value.

        Raises:
            Exception: Whatever ``fetch`` raised, when no previous value
                exists for ``key``.
        """
        if not force and self.is_fresh(key):
            return self._entries[key].value

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Another caller may have refreshed the entry while we waited
            if not force and self.is_fresh(key):
                return self._entries[key].value

            previous = self._entries.get(key)
            try:
                value = await fetch()
            except Exception as e:
                if previous is None:
                    raise
                LOG.warning(
                    "Refresh of %s failed, serving value from %s: %s",
                    key,
                    previous.updated_at.isoformat(),
                    e,
                )
                return previous.value

            self.set(key, value)
            LOG.debug("Cached %s", key)
            return value


class DiskCache:
    """
    Disk-backed key/value store.

    Stores values in a directory on disk using the diskcache library.
    Thread-safe and process-safe.

    Attributes:
        cache_dir: Path to the cache directory.
    """

    def __init__(self, cache_dir: str | Path) -> None:
        """
        Initialize the disk cache.

        Args:
            cache_dir: Directory path for storing cache files.
                       Created if it doesn't exist.
        """
        self.cache_dir = Path(cache_dir)
        self._cache = diskcache.Cache(str(self.cache_dir))

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key`` or ``default``."""
        return self._cache.get(key, default=default)

    def set(self, key: str, value: Any, expire: int | None = None) -> None:
        """
        Store a value.

        Args:
            key: Cache key string.
            value: Value to store.
            expire: TTL in seconds. None means no expiration.
        """
        self._cache.set(key, value, expire=expire)

    def delete(self, key: str) -> None:
        """Delete a key from the store."""
        self._cache.delete(key)

    def close(self) -> None:
        """Close the store and release resources."""
        self._cache.close()
