"""Rate limiter interfaces.

Routes depend on this abstraction rather than the in-memory implementation so
the store can move to a shared TTL cache (e.g., Redis) when limits must hold
across processes.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit consume operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the key's current window ends.
        retry_after_ms: Wait time in milliseconds when blocked, else None.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after_ms: int | None = None

    @property
    def ok(self) -> bool:
        return self.allowed

    @property
    def retry_after_seconds(self) -> int | None:
        """Whole seconds to wait, rounded up (suitable for Retry-After)."""
        if self.retry_after_ms is None:
            return None
        return int(math.ceil(self.retry_after_ms / 1000))


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def consume(self, key: str, *, cost: int = 1) -> RateLimitResult:
        """Consume rate limit budget for a given key.

        Args:
            key: Client identifier (e.g., forwarded client IP).
            cost: Units to consume (default 1).

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError

    @abstractmethod
    def reset(self) -> None:
        """Forget every tracked key."""
        raise NotImplementedError
