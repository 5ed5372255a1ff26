"""In-memory fixed window rate limiter.

The first request from a token opens a window of ``interval_ms`` with a count
of one. Later requests increment the count while it is below the limit and
are rejected, without counting, once it is not. The window closes when the
cache entry expires; increments do not extend it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
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


@dataclass
class _WindowState:
    count: int


class FixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter using one counter per token per window.

    Cheaper than the sliding window (a single integer per token) at the cost
    of allowing up to twice the limit across a window boundary.
    """

    strategy = "fixed_window"

    def __init__(
        self,
        *,
        interval_ms: int | None = None,
        unique_token_per_interval: int | None = None,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self._interval_ms, capacity = resolve_window_options(
            interval_ms, unique_token_per_interval
        )
        self._lock = threading.RLock()
        self._cache: TokenCache[_WindowState] = TokenCache(
            ttl=self._interval_ms, max_entries=capacity, clock=clock
        )

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    def check(self, limit: int, token: str) -> int:
        validate_check_args(limit, token)

        with self._lock:
            state = self._cache.get(token)
            if state is None:
                # Opening a window is the only write; it fixes the expiry.
                self._cache.set(token, _WindowState(count=1))
                return 1

            if state.count < limit:
                state.count += 1
                return state.count

            current = state.count

        logger.debug(
            "rate_limit.window_full",
            extra={"token_hash": hash_identifier(token), "limit": limit, "count": current},
        )
        raise RateLimitExceededError(limit)

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
