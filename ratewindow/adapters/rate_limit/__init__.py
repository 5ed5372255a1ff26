"""Rate limiting adapters.

Two in-memory strategies share one interface: a sliding window over request
timestamps and a fixed window counter. Both keep their per-token state in a
capacity-bounded TTL cache.
"""

from ratewindow.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from ratewindow.adapters.rate_limit.factory import build_rate_limiter
from ratewindow.adapters.rate_limit.fixed_window import FixedWindowRateLimiter
from ratewindow.adapters.rate_limit.sliding_window import SlidingWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "FixedWindowRateLimiter",
    "RateLimitResult",
    "SlidingWindowRateLimiter",
    "build_rate_limiter",
]
