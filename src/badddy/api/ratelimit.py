"""
badddy.api.ratelimit

Per-IP fixed-window rate limiting.

Responsibilities:
- Count requests per client IP in fixed windows (default 10 per minute).
- Reject the excess with `RateLimitError` (429) before authentication runs.
"""

from __future__ import annotations

import time
from collections.abc import Callable

import structlog
from fastapi import Request

from badddy.errors import RateLimitError

log = structlog.get_logger(__name__)


class FixedWindowRateLimiter:
    """
    In-memory counters, reset together at each window boundary.
    Per-process: replicas each enforce their own limit.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._window = -1
        self._counts: dict[str, int] = {}

    def hit(self, key: str) -> bool:
        window = int(self._clock() // self._window_seconds)
        if window != self._window:
            self._window = window
            self._counts.clear()
        count = self._counts.get(key, 0) + 1
        self._counts[key] = count
        return count <= self.limit


async def enforce_rate_limit(request: Request) -> None:
    limiter: FixedWindowRateLimiter = request.app.state.rate_limiter
    client_ip = request.client.host if request.client else "unknown"
    if not limiter.hit(client_ip):
        log.warning("rate_limit.exceeded", client_ip=client_ip, limit=limiter.limit)
        raise RateLimitError()
