from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from ratewindow.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from ratewindow.core.auth import verify_api_key
from ratewindow.core.rate_limit import enforce_rate_limit, get_rate_limiter
from ratewindow.schemas.limits import (
    CheckRequest,
    CheckResponse,
    LimiterStatsResponse,
    ResetResponse,
)

router = APIRouter(prefix="/limits", tags=["Limits"])

# Throttle management calls per client before the API key is checked.
_admin_dependencies = [Depends(enforce_rate_limit), Depends(verify_api_key)]

LimiterDep = Annotated[AbstractRateLimiter, Depends(get_rate_limiter)]


@router.post(
    "/check",
    response_model=CheckResponse,
    dependencies=[Depends(verify_api_key)],
)
async def check_limit(body: CheckRequest, limiter: LimiterDep) -> CheckResponse:
    """Count one call for ``body.token`` against ``body.limit``.

    Services that cannot embed the limiter consult it here. An over-limit
    token gets HTTP 429 with error code ``rate_limit_exceeded``.

    Returns:
        CheckResponse: Window usage for the token after counting this call.
    """
    count = await limiter.acheck(body.limit, body.token)
    result = RateLimitResult(limit=body.limit, count=count)
    return CheckResponse(
        allowed=True,
        limit=result.limit,
        count=result.count,
        remaining=result.remaining,
    )


@router.get("/stats", response_model=LimiterStatsResponse, dependencies=_admin_dependencies)
def limiter_stats(limiter: LimiterDep) -> LimiterStatsResponse:
    """Return cache counters without exposing any token."""

    return LimiterStatsResponse(**limiter.stats())


@router.delete("/{token:path}", response_model=ResetResponse, dependencies=_admin_dependencies)
def reset_token(token: str, limiter: LimiterDep) -> ResetResponse:
    """Forget the request history of a single token."""

    limiter.reset(token)
    return ResetResponse(reset=token)


@router.delete("", response_model=ResetResponse, dependencies=_admin_dependencies)
def reset_all(limiter: LimiterDep) -> ResetResponse:
    """Forget the request history of every token."""

    limiter.reset()
    return ResetResponse(reset="*")
