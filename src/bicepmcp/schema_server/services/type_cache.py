"""Time-bounded in-memory cache for fetched Bicep type data."""

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from cachetools import TTLCache

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 24 * 60 * 60


class TypeCache:
    """Keyed TTL cache shared by every resolution in the process.

    Entries are written whole and never mutated. Concurrent misses on the same
    key may both fetch and both write; the last write wins and the values are
    identical, so no single-flight locking is done here.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_CACHE_TTL,
        max_size: int = 4096,
        timer: Callable[[], float] = time.monotonic,
    ):
        """Initialize the type cache.

        Args:
            ttl: Time-to-live for cache entries in seconds
            max_size: Maximum number of entries to keep
            timer: Clock used to expire entries (injectable for tests)
        """
        self.ttl = ttl
        self.max_size = max_size
        self._cache: TTLCache[str, Any] = TTLCache(maxsize=max_size, ttl=ttl, timer=timer)
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Any | None:
        """Return the cached value for ``key`` or None when absent or expired."""
        with self._lock:
            value = self._cache.get(key)
            if value is None:
                self._misses += 1
            else:
                self._hits += 1
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._cache[key] = value

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._cache

    def __len__(self) -> int:
        with self._lock:
            self._cache.expire()
            return len(self._cache)

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total = self._hits + self._misses
            return {
                "entries": len(self._cache),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total if total else 0.0,
                "max_size": self.max_size,
                "ttl_seconds": self.ttl,
            }
