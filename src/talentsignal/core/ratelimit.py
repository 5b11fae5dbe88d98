"\"\"\"Per-provider sliding-window rate limiting.\"\"\""

from __future__ import annotations

import asyncio
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable


@dataclass
class RateLimitConfig:
    """Requests allowed per sliding window."""

    max_requests: int = 30
    window_seconds: float = 60.0


class RateLimiter:
    """Non-blocking sliding-window limiter shared by all fetches of one provider.

    ``try_acquire`` records the request and returns True while the window has
    room, and returns False once it is full. Callers decide how to surface the
    refusal; source fetchers turn it into a rate-limited fetch error.
    """

    def __init__(
        self,
        provider: str,
        *,
        config: RateLimitConfig | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.provider = provider
        self._config = config or RateLimitConfig()
        self._clock = clock or time.monotonic
        self._window: deque[float] = deque()
        self._lock = asyncio.Lock()

    @property
    def config(self) -> RateLimitConfig:
        return self._config

    async def try_acquire(self) -> bool:
        async with self._lock:
            now = self._clock()
            self._clean(now)
            if len(self._window) >= self._config.max_requests:
                return False
            self._window.append(now)
            return True

    async def retry_after(self) -> float:
        """Seconds until the oldest request leaves the window."""
        async with self._lock:
            now = self._clock()
            self._clean(now)
            if len(self._window) < self._config.max_requests:
                return 0.0
            return max(0.0, self._window[0] + self._config.window_seconds - now)

    def _clean(self, now: float) -> None:
        cutoff = now - self._config.window_seconds
        while self._window and self._window[0] <= cutoff:
            self._window.popleft()
