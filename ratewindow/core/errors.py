"""Application-level exception types.

This module defines domain errors used across adapters and routes, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    limit: int
    strategy: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when authentication/authorization fails."""


class RateLimitExceededError(AppError):
    """Raised when a token made more requests than allowed in the window.

    Carries no retry hint: callers decide whether and when to try again.
    """

    def __init__(self, limit: int) -> None:
        super().__init__(
            code="rate_limit_exceeded",
            message="Rate limit exceeded",
            details={"limit": limit},
        )

    @property
    def limit(self) -> int:
        return (self.details or {}).get("limit", 0)
