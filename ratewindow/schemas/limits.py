"""Pydantic schemas for the limiter management endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CheckRequest(BaseModel):
    """Request to count one call for a token against a limit."""

    token: str = Field(
        ...,
        min_length=1,
        description="Opaque client identifier, e.g. an IP address or user id.",
    )
    limit: int = Field(
        ...,
        ge=1,
        description="Maximum number of requests allowed for the token within the interval.",
    )


class CheckResponse(BaseModel):
    """Successful check: the call was counted and is within the limit."""

    allowed: bool = Field(True, description="Always true; rejections return HTTP 429.")
    limit: int = Field(..., description="Limit the call was checked against.")
    count: int = Field(..., description="Calls counted for the token in the current window.")
    remaining: int = Field(..., description="Calls left before the limit is reached.")


class LimiterStatsResponse(BaseModel):
    """Counters describing the limiter's tracked state."""

    strategy: str = Field(..., description="Counting strategy in use.")
    interval_ms: int = Field(..., description="Window length in milliseconds.")
    max_entries: int | None = Field(
        None, description="Maximum number of tokens tracked before LRU eviction."
    )
    entries: int = Field(..., description="Tokens currently tracked.")
    hits: int = Field(..., description="Lookups that found a live record.")
    misses: int = Field(..., description="Lookups for unknown or expired tokens.")
    evictions: int = Field(..., description="Records dropped by expiry or capacity.")


class ResetResponse(BaseModel):
    """Acknowledgement of a reset."""

    reset: str = Field(..., description="Token that was reset, or '*' for all tokens.")
