"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Rate limiting strategy:
- One budget per client address and route path.
- Client address comes from X-Forwarded-For when trusted (the service
  normally sits behind a proxy), then the socket peer.
- Budgets live in their own limiter (``app.state.route_limiter``), separate
  from the service tokens in ``app.state.rate_limiter``.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request, Response

from ratewindow.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from ratewindow.core.config import settings
from ratewindow.core.errors import RateLimitExceededError
from ratewindow.core.logging import hash_identifier

logger = logging.getLogger(__name__)

FALLBACK_CLIENT_ADDRESS = "127.0.0.1"


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter serving tokens submitted to /v1/limits/check."""

    return request.app.state.rate_limiter


def get_route_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter holding per-route client budgets.

    Never the instance returned by :func:`get_rate_limiter`.
    """

    return request.app.state.route_limiter


def resolve_client_address(request: Request) -> str:
    """Determine the address a request is attributed to.

    Args:
        request: FastAPI request.

    Returns:
        str: First X-Forwarded-For hop when trusted, else the peer host,
            else the loopback address.
    """

    if settings.rate_limit.trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            first_hop = forwarded.split(",")[0].strip()
            if first_hop:
                return first_hop

    if request.client and request.client.host:
        return request.client.host
    return FALLBACK_CLIENT_ADDRESS


def build_rate_limit_key(request: Request) -> str:
    """Build the limiter token for the current request (route + client)."""

    return f"{request.url.path}:{resolve_client_address(request)}"


def apply_rate_limit_headers(response: Response, result: RateLimitResult) -> None:
    """Expose the caller's budget on a successful response."""

    if not settings.rate_limit.include_headers:
        return
    response.headers["X-RateLimit-Limit"] = str(result.limit)
    response.headers["X-RateLimit-Remaining"] = str(result.remaining)


async def enforce_rate_limit(
    request: Request,
    response: Response,
    limiter: Annotated[AbstractRateLimiter, Depends(get_route_limiter)],
) -> None:
    """FastAPI dependency enforcing per-client, per-route rate limits.

    When enabled, counts the request against the caller's budget. Exceeding
    the budget raises :class:`RateLimitExceededError`, which the exception
    handlers render as HTTP 429.

    Args:
        request: FastAPI request.
        response: Response whose headers receive the X-RateLimit-* values.
        limiter: Per-route client limiter.

    Raises:
        RateLimitExceededError: When the caller is over the limit.
    """

    cfg = settings.rate_limit
    if not cfg.enabled:
        return

    key = build_rate_limit_key(request)
    key_hash = hash_identifier(key)

    try:
        count = await limiter.acheck(cfg.requests, key)
    except RateLimitExceededError:
        logger.warning(
            "rate_limit.exceeded",
            extra={
                "key_hash": key_hash,
                "route": request.url.path,
                "limit": cfg.requests,
                "interval_ms": cfg.interval_ms,
                "strategy": limiter.strategy,
            },
        )
        raise

    result = RateLimitResult(limit=cfg.requests, count=count)
    logger.info(
        "rate_limit.allowed",
        extra={
            "key_hash": key_hash,
            "route": request.url.path,
            "limit": result.limit,
            "remaining": result.remaining,
            "interval_ms": cfg.interval_ms,
        },
    )
    apply_rate_limit_headers(response, result)
