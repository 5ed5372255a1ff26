"""Application factory for the FastAPI app.

Centralizes app construction (limiter, middleware, handlers, routers) so
tests can build isolated apps with their own limiter and clock.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from ratewindow import __version__
from ratewindow.adapters.rate_limit import AbstractRateLimiter, build_rate_limiter
from ratewindow.api.routes import health_router, limits_router
from ratewindow.core.config import settings
from ratewindow.core.exception_handlers import setup_exception_handlers
from ratewindow.core.logging import configure_logging
from ratewindow.core.middleware import request_id_middleware
from ratewindow.core.openapi import apply_openapi_customizations

logger = logging.getLogger(__name__)


def create_app(
    rate_limiter: AbstractRateLimiter | None = None,
    route_limiter: AbstractRateLimiter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        rate_limiter: Limiter for tokens submitted to /v1/limits/check;
            built from settings when omitted.
        route_limiter: Limiter for per-route client budgets; built from
            settings when omitted. Must not be the same instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="ratewindow",
        description=(
            "Request rate limiting for Synthalyst services: a sliding window "
            "counter per client token, backed by an in-memory LRU cache with "
            "expiry. Management endpoints require X-API-Key."
        ),
        version=__version__,
    )

    app.state.rate_limiter = rate_limiter or build_rate_limiter(settings.rate_limit)
    # Per-route client budgets never share a cache with service tokens.
    app.state.route_limiter = route_limiter or build_rate_limiter(settings.rate_limit)
    logger.info(
        "rate_limiter.ready",
        extra={
            "strategy": app.state.rate_limiter.strategy,
            "enabled": settings.rate_limit.enabled,
            "requests": settings.rate_limit.requests,
            "interval_ms": settings.rate_limit.interval_ms,
        },
    )

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(limits_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
