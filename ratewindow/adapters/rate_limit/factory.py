"""Factory for building the configured rate limiter."""

from __future__ import annotations

from ratewindow.adapters.rate_limit.base import AbstractRateLimiter
from ratewindow.adapters.rate_limit.fixed_window import FixedWindowRateLimiter
from ratewindow.adapters.rate_limit.sliding_window import SlidingWindowRateLimiter
from ratewindow.core.config import RateLimitSettings, settings
from ratewindow.core.errors import ValidationAppError

_STRATEGIES: dict[str, type[AbstractRateLimiter]] = {
    SlidingWindowRateLimiter.strategy: SlidingWindowRateLimiter,
    FixedWindowRateLimiter.strategy: FixedWindowRateLimiter,
}


def build_rate_limiter(rate_limit_settings: RateLimitSettings | None = None) -> AbstractRateLimiter:
    """Instantiate the limiter selected by ``RATE_LIMIT_STRATEGY``.

    Args:
        rate_limit_settings: Policy to build from; defaults to global settings.

    Returns:
        AbstractRateLimiter: A fresh limiter with its own empty cache.

    Raises:
        ValidationAppError: If the strategy name is not recognised.
    """
    cfg = rate_limit_settings or settings.rate_limit
    strategy = cfg.strategy.strip().lower()

    limiter_cls = _STRATEGIES.get(strategy)
    if limiter_cls is None:
        raise ValidationAppError(
            code="unknown_rate_limit_strategy",
            message=(
                f"Unknown rate limit strategy: '{strategy}'. "
                f"Supported strategies: {', '.join(sorted(_STRATEGIES))}"
            ),
            details={"strategy": strategy},
        )

    return limiter_cls(
        interval_ms=cfg.interval_ms,
        unique_token_per_interval=cfg.unique_token_per_interval,
    )
