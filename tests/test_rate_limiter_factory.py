"""Tests for building limiters from settings."""

import pytest

from ratewindow.adapters.rate_limit import (
    FixedWindowRateLimiter,
    SlidingWindowRateLimiter,
    build_rate_limiter,
)
from ratewindow.core.config import RateLimitSettings
from ratewindow.core.errors import ValidationAppError


def test_defaults_to_sliding_window() -> None:
    limiter = build_rate_limiter()

    assert isinstance(limiter, SlidingWindowRateLimiter)
    assert limiter.interval_ms == 60_000


def test_builds_fixed_window_with_configured_interval() -> None:
    cfg = RateLimitSettings(strategy=" Fixed_Window ", interval_ms=5_000, unique_token_per_interval=10)

    limiter = build_rate_limiter(cfg)

    assert isinstance(limiter, FixedWindowRateLimiter)
    assert limiter.stats()["interval_ms"] == 5_000
    assert limiter.stats()["max_entries"] == 10


def test_each_build_returns_independent_state() -> None:
    first = build_rate_limiter()
    second = build_rate_limiter()

    first.check(1, "k")

    assert second.check(1, "k") == 1


def test_unknown_strategy_raises() -> None:
    cfg = RateLimitSettings(strategy="token_bucket")

    with pytest.raises(ValidationAppError) as exc_info:
        build_rate_limiter(cfg)

    assert exc_info.value.code == "unknown_rate_limit_strategy"
    assert "sliding_window" in exc_info.value.message
