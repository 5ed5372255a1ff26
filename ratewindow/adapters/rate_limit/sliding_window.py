"""In-memory sliding window rate limiter.

Each token maps to the list of request timestamps seen within the last
``interval_ms``. The list lives in a :class:`TokenCache` whose TTL equals the
interval and whose capacity is ``unique_token_per_interval``, so idle or
least recently used tokens drop out on their own.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: the read-prune-append-write sequence runs under a lock.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from ratewindow.adapters.rate_limit.base import (
    AbstractRateLimiter,
    resolve_window_options,
    validate_check_args,
)
from ratewindow.core.errors import RateLimitExceededError
from ratewindow.core.logging import hash_identifier
from ratewindow.utils.token_cache import TokenCache, monotonic_ms

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting requests in a trailing time window per token.

    Unlike a fixed window, the count never resets at a boundary: a request
    stops counting exactly ``interval_ms`` after it was made.

    Rejected requests are recorded as well, so a client that keeps calling
    past its limit stays blocked until it slows down. The cost is that a
    token's list holds every call made within the window, and each check
    copies it: memory and time per check are O(calls in the window).
    """

    strategy = "sliding_window"

    def __init__(
        self,
        *,
        interval_ms: int | None = None,
        unique_token_per_interval: int | None = None,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        """Initialize the limiter and its backing cache.

        Args:
            interval_ms: Window length in milliseconds (falsy means 60000).
            unique_token_per_interval: Max distinct tokens tracked (falsy means 500).
            clock: Millisecond time source.

        Raises:
            ValueError: If an option is negative.
        """
        self._interval_ms, capacity = resolve_window_options(
            interval_ms, unique_token_per_interval
        )
        self._clock = clock
        self._lock = threading.RLock()
        self._cache: TokenCache[list[float]] = TokenCache(
            ttl=self._interval_ms, max_entries=capacity, clock=clock
        )

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    def check(self, limit: int, token: str) -> int:
        validate_check_args(limit, token)

        with self._lock:
            now = self._clock()
            timestamps = self._cache.get(token) or []
            window = [ts for ts in timestamps if now - ts < self._interval_ms]
            window.append(now)
            self._cache.set(token, window)

        count = len(window)
        if count > limit:
            logger.debug(
                "rate_limit.window_full",
                extra={"token_hash": hash_identifier(token), "limit": limit, "count": count},
            )
            raise RateLimitExceededError(limit)
        return count

    def reset(self, token: str | None = None) -> None:
        with self._lock:
            if token is None:
                self._cache.clear()
            else:
                self._cache.delete(token)

    def stats(self) -> dict[str, Any]:
        return {
            "strategy": self.strategy,
            "interval_ms": self._interval_ms,
            **self._cache.stats(),
        }
