"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any import of ``ratewindow`` so the
settings object is built from them instead of a local .env file.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"

os.environ.setdefault("APP_API_KEY_REQUIRED", "true")
os.environ.setdefault("APP_API_KEYS", "test-api-key-123,test-api-key-456")
os.environ.setdefault("RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("RATE_LIMIT_REQUESTS", "20")
os.environ.setdefault("RATE_LIMIT_INTERVAL_MS", "60000")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from ratewindow.adapters.rate_limit import SlidingWindowRateLimiter  # noqa: E402
from ratewindow.core.app_factory import create_app  # noqa: E402

API_KEY = "test-api-key-123"


class FakeClock:
    """Deterministic millisecond clock used to drive window expiry."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, ms: float) -> None:
        self.current += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(
        interval_ms=60_000, unique_token_per_interval=500, clock=clock
    )


@pytest.fixture
def route_limiter(clock: FakeClock) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(
        interval_ms=60_000, unique_token_per_interval=500, clock=clock
    )


@pytest.fixture
def client(
    limiter: SlidingWindowRateLimiter, route_limiter: SlidingWindowRateLimiter
) -> TestClient:
    """Client for an app serving the fake-clock limiters."""
    return TestClient(create_app(rate_limiter=limiter, route_limiter=route_limiter))


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-API-Key": API_KEY}
