"""Rate limiter interfaces.

Routes depend on this abstraction (not the concrete implementation) so the
counting strategy can be swapped through configuration.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

DEFAULT_INTERVAL_MS = 60_000
DEFAULT_UNIQUE_TOKENS = 500


@dataclass(frozen=True)
class RateLimitResult:
    """Window usage after an allowed check, as reported to HTTP clients.

    Rejected checks raise instead of producing a result.

    Attributes:
        limit: Max requests per window.
        count: Requests counted for the token in the current window.
        remaining: Requests left before the limit is hit.
    """

    limit: int
    count: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.count)


def validate_check_args(limit: int, token: str) -> None:
    """Reject misuse of ``check`` before any state is touched.

    Raises:
        ValueError: If limit is not a positive int or token is not a non-empty string.
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError("limit must be an integer >= 1")
    if not isinstance(token, str) or not token:
        raise ValueError("token must be a non-empty string")


def resolve_window_options(
    interval_ms: int | None, unique_token_per_interval: int | None
) -> tuple[int, int]:
    """Apply defaults to falsy constructor options and validate the rest.

    Returns:
        Tuple of (interval_ms, unique_token_per_interval).

    Raises:
        ValueError: If either option is negative.
    """
    if interval_ms is not None and interval_ms < 0:
        raise ValueError("interval_ms must be >= 0")
    if unique_token_per_interval is not None and unique_token_per_interval < 0:
        raise ValueError("unique_token_per_interval must be >= 0")
    return (
        interval_ms or DEFAULT_INTERVAL_MS,
        unique_token_per_interval or DEFAULT_UNIQUE_TOKENS,
    )


class AbstractRateLimiter(ABC):
    """Interface for rate limiters keyed by an opaque client token."""

    strategy: str = ""

    @abstractmethod
    def check(self, limit: int, token: str) -> int:
        """Count one request for ``token`` and enforce ``limit``.

        Args:
            limit: Maximum requests allowed for the token within the window.
            token: Opaque client identifier (IP address, user id, ...).

        Returns:
            Number of requests counted for the token in the current window.

        Raises:
            RateLimitExceededError: If the token is over its limit.
            ValueError: If limit or token are invalid.
        """
        raise NotImplementedError

    async def acheck(self, limit: int, token: str) -> int:
        """Awaitable form of :meth:`check`; never suspends."""
        return self.check(limit, token)

    @abstractmethod
    def reset(self, token: str | None = None) -> None:
        """Forget one token's history, or every token when ``token`` is None."""
        raise NotImplementedError

    @abstractmethod
    def stats(self) -> dict[str, Any]:
        """Return counters describing the limiter's tracked state."""
        raise NotImplementedError
