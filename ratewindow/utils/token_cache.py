"""In-memory TTL cache with LRU eviction backing the rate limiters.

Entries expire ``ttl`` clock units after they were last written, and the
least recently used entry is dropped once ``max_entries`` is exceeded.
Reading an entry refreshes its LRU position but not its expiry.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from ratewindow.core.logging import hash_identifier

logger = logging.getLogger(__name__)

V = TypeVar("V")


def monotonic_ms() -> float:
    """Default clock: monotonic milliseconds."""

    return time.monotonic() * 1000


@dataclass
class CacheItem(Generic[V]):
    """Container for cached values with expiration metadata."""

    value: V
    expires_at: float


class TokenCache(Generic[V]):
    """Thread-safe, in-memory TTL cache with LRU eviction.

    Attributes:
        ttl: Time-to-live applied to every write, in the clock's unit.
        max_entries: Maximum number of cached items (None for unlimited).
    """

    def __init__(
        self,
        *,
        ttl: float,
        max_entries: int | None = 500,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl: Expiry applied to each write; must be positive.
            max_entries: Capacity before LRU eviction, or None for unbounded.
            clock: Time source; its unit defines the unit of ``ttl``.

        Raises:
            ValueError: If ttl or max_entries are invalid.
        """
        if ttl <= 0:
            raise ValueError("ttl must be > 0")
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1 or None")

        self._ttl = ttl
        self._max_entries = max_entries
        self._clock = clock
        self._store: OrderedDict[str, CacheItem[V]] = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"TokenCache(ttl={self._ttl}, max_entries={self._max_entries}, "
            f"size={len(self._store)}, hits={self._hits}, misses={self._misses}, "
            f"evictions={self._evictions})"
        )

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired_locked(self._clock())
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            item = self._store.get(key)  # type: ignore[arg-type]
            return item is not None and not self._is_expired(item, self._clock())

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def max_entries(self) -> int | None:
        return self._max_entries

    def get(self, key: str) -> V | None:
        """Retrieve a cached value if it exists and is not expired.

        Args:
            key: Cache key.

        Returns:
            Cached value or None if not found/expired.
        """

        with self._lock:
            item = self._store.get(key)
            if item is None:
                self._misses += 1
                return None

            if self._is_expired(item, self._clock()):
                self._evict_single(key, reason="expired")
                self._misses += 1
                return None

            self._hits += 1
            self._store.move_to_end(key)  # mark as recently used
            return item.value

    def set(self, key: str, value: V) -> None:
        """Store a value with a fresh TTL, evicting as needed.

        Args:
            key: Cache key.
            value: Value to store.
        """

        with self._lock:
            now = self._clock()
            self._evict_expired_locked(now)
            self._store[key] = CacheItem(value=value, expires_at=now + self._ttl)
            self._store.move_to_end(key)
            self._evict_if_over_capacity_locked()

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it was present."""

        with self._lock:
            return self._store.pop(key, None) is not None

    def clear(self) -> None:
        """Remove all cached entries and reset counters."""

        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def stats(self) -> dict[str, Any]:
        """Return lightweight cache metrics without exposing keys or values."""

        with self._lock:
            self._evict_expired_locked(self._clock())
            return {
                "ttl": self._ttl,
                "max_entries": self._max_entries,
                "entries": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def _evict_single(self, key: str, *, reason: str) -> None:
        if self._store.pop(key, None) is not None:
            self._evictions += 1
            logger.debug(
                "cache.evict",
                extra={"cache_key": hash_identifier(key), "reason": reason},
            )

    def _evict_expired_locked(self, now: float) -> None:
        expired_keys = [k for k, item in self._store.items() if self._is_expired(item, now)]
        for key in expired_keys:
            self._evict_single(key, reason="expired")

    def _evict_if_over_capacity_locked(self) -> None:
        if self._max_entries is None:
            return

        while len(self._store) > self._max_entries:
            # Front of the OrderedDict is the least recently used entry
            oldest_key = next(iter(self._store))
            self._evict_single(oldest_key, reason="capacity")

    @staticmethod
    def _is_expired(item: CacheItem[V], now: float) -> bool:
        return now >= item.expires_at
