"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: the read-check-write sequence runs under a lock.
- Each key's window starts at its first request, not at a clock boundary.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from heirlooms.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult

logger = logging.getLogger(__name__)


@dataclass
class _WindowState:
    count: int
    window_reset_at: float


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting requests per key inside a fixed window.

    A key's first request (or its first request after the window expired)
    opens a new window of ``window_ms`` milliseconds. Up to ``limit`` units
    are accepted inside that window; further requests are denied with the
    time left until the window closes.

    Expired records are dropped by a time-gated sweep so the map does not
    grow with every client ever seen.

    Important:
        This limiter is per-process only. If the API runs with multiple
        workers, each worker enforces its own independent limits.
    """

    def __init__(
        self,
        *,
        limit: int = 10,
        window_ms: int = 60_000,
        clock: Callable[[], float] = time.time,
        sweep_interval_ms: int | None = None,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of allowed units per window.
            window_ms: Size of the fixed window in milliseconds.
            clock: Time source returning UNIX time in seconds.
            sweep_interval_ms: Minimum delay between sweeps of expired
                records. Defaults to one window.

        Raises:
            ValueError: If limit, window_ms or sweep_interval_ms are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_ms < 1:
            raise ValueError("window_ms must be >= 1")
        if sweep_interval_ms is not None and sweep_interval_ms < 1:
            raise ValueError("sweep_interval_ms must be >= 1")

        self._limit = limit
        self._window_ms = window_ms
        self._sweep_interval_s = (sweep_interval_ms or window_ms) / 1000
        self._clock = clock
        self._lock = threading.RLock()
        self._state_by_key: dict[str, _WindowState] = {}
        self._last_sweep_at = clock()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_ms(self) -> int:
        return self._window_ms

    @property
    def tracked_keys(self) -> int:
        """Number of keys currently held in memory."""
        with self._lock:
            return len(self._state_by_key)

    def reset(self) -> None:
        with self._lock:
            self._state_by_key.clear()
            self._last_sweep_at = self._clock()

    def _sweep_expired_locked(self, now: float) -> None:
        if now - self._last_sweep_at < self._sweep_interval_s:
            return

        expired = [k for k, s in self._state_by_key.items() if now >= s.window_reset_at]
        for key in expired:
            del self._state_by_key[key]
        self._last_sweep_at = now

        if expired:
            logger.debug(
                "rate_limit.sweep",
                extra={"evicted": len(expired), "tracked": len(self._state_by_key)},
            )

    def _build_allowed_result(self, state: _WindowState) -> RateLimitResult:
        return RateLimitResult(
            allowed=True,
            limit=self._limit,
            remaining=max(0, self._limit - state.count),
            reset_at=state.window_reset_at,
        )

    def _build_blocked_result(self, *, now: float, state: _WindowState) -> RateLimitResult:
        # now < window_reset_at here, so the wait is at least 1ms
        retry_after_ms = max(1, int(math.ceil((state.window_reset_at - now) * 1000)))
        return RateLimitResult(
            allowed=False,
            limit=self._limit,
            remaining=max(0, self._limit - state.count),
            reset_at=state.window_reset_at,
            retry_after_ms=min(retry_after_ms, self._window_ms),
        )

    def consume(self, key: str, *, cost: int = 1) -> RateLimitResult:
        """Consume rate limit budget for the provided key.

        Checks the key's current window and mutates the state only when the
        request is allowed. Any string is a valid key.

        Args:
            key: Client identifier for rate limiting.
            cost: Units to consume (default 1).

        Returns:
            RateLimitResult with allowance decision and metadata.

        Raises:
            ValueError: If cost is invalid.
        """
        if cost < 1:
            raise ValueError("cost must be >= 1")

        with self._lock:
            now = self._clock()
            self._sweep_expired_locked(now)

            state = self._state_by_key.get(key)
            if state is None or now >= state.window_reset_at:
                state = _WindowState(count=0, window_reset_at=now + self._window_ms / 1000)
                self._state_by_key[key] = state

            if state.count + cost <= self._limit:
                state.count += cost
                return self._build_allowed_result(state)

            return self._build_blocked_result(now=now, state=state)
