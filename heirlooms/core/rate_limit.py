"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Strategy:
- Fixed window per client, keyed by the first X-Forwarded-For entry.
- Falls back to the socket peer address, then to a shared "unknown" bucket.
- Limits are enforced per process; see the in-memory adapter notes.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import HTTPException, Request, status

from heirlooms.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from heirlooms.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from heirlooms.core.config import settings

logger = logging.getLogger(__name__)


_limiter: AbstractRateLimiter | None = None
_limiter_config: tuple[int, int, int | None] | None = None


def get_rate_limiter() -> AbstractRateLimiter:
    """Return a process-wide rate limiter instance.

    The instance is cached in-module to preserve state across requests.
    If configuration changes (primarily in tests), the limiter is rebuilt.

    Returns:
        AbstractRateLimiter: Configured limiter instance.
    """

    global _limiter, _limiter_config

    config = (
        settings.app.rate_limit_requests,
        settings.app.rate_limit_window_ms,
        settings.app.rate_limit_sweep_interval_ms,
    )

    if _limiter is None or _limiter_config != config:
        _limiter = InMemoryFixedWindowRateLimiter(
            limit=settings.app.rate_limit_requests,
            window_ms=settings.app.rate_limit_window_ms,
            sweep_interval_ms=settings.app.rate_limit_sweep_interval_ms,
        )
        _limiter_config = config

    return _limiter


def check_rate_limit(key: str) -> RateLimitResult:
    """Consume one request for ``key`` from the process-wide limiter."""
    return get_rate_limiter().consume(key)


def client_key_from_request(request: Request) -> str:
    """Resolve the client identifier used as limiter key.

    Args:
        request: FastAPI request.

    Returns:
        str: First forwarded address, peer host, or "unknown".
    """

    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing client addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing rate limits.

    When enabled, consumes 1 unit from the requester's budget. If the requester
    exceeds the configured rate, raises HTTP 429.

    Args:
        request: FastAPI request.

    Raises:
        HTTPException: 429 Too Many Requests when rate limit is exceeded.
    """

    if not settings.app.rate_limit_enabled:
        return

    key = client_key_from_request(request)
    key_hash = _hash_limiter_key(key)

    result = check_rate_limit(key)
    if result.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={
                "key_hash": key_hash,
                "limit": result.limit,
                "remaining": result.remaining,
                "window_ms": settings.app.rate_limit_window_ms,
            },
        )
        return

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": key_hash,
            "limit": result.limit,
            "window_ms": settings.app.rate_limit_window_ms,
            "retry_after_ms": result.retry_after_ms,
        },
    )

    headers: dict[str, str] = {}
    if settings.app.rate_limit_include_headers:
        headers["Retry-After"] = str(result.retry_after_seconds or 0)
        headers["X-RateLimit-Limit"] = str(result.limit)
        headers["X-RateLimit-Remaining"] = str(result.remaining)
        headers["X-RateLimit-Reset"] = str(int(result.reset_at))

    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Too Many Requests",
        headers=headers or None,
    )
