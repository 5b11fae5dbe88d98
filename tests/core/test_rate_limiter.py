from __future__ import annotations

import asyncio

import pytest

from talentsignal.core import RateLimitConfig, RateLimiter


def test_sliding_window_refuses_then_recovers():
    now = [0.0]
    limiter = RateLimiter(
        "code_hosting",
        config=RateLimitConfig(max_requests=2, window_seconds=10.0),
        clock=lambda: now[0],
    )

    async def scenario():
        first = await limiter.try_acquire()
        now[0] = 4.0
        second = await limiter.try_acquire()
        third = await limiter.try_acquire()
        wait = await limiter.retry_after()
        now[0] = 10.5
        fourth = await limiter.try_acquire()
        return first, second, third, wait, fourth

    first, second, third, wait, fourth = asyncio.run(scenario())

    assert (first, second, third) == (True, True, False)
    assert wait == pytest.approx(6.0)
    assert fourth is True


def test_retry_after_is_zero_with_room():
    limiter = RateLimiter("forum", clock=lambda: 0.0)
    assert asyncio.run(limiter.retry_after()) == 0.0
