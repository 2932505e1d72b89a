from __future__ import annotations

import pytest

from coach_voice.errors import RateLimitError
from coach_voice.handlers.limits import SlidingWindowRateLimiter
from coach_voice.handlers.websocket.limits import consume_limiter, select_rate_limiter

from fakes import FakeWebSocket


class _Clock:
    def __init__(self) -> None:
        self.t = 0.0

    def __call__(self) -> float:
        return self.t


def test_rate_limiter_allows_within_limit() -> None:
    limiter = SlidingWindowRateLimiter(limit=2, window_seconds=10, now_fn=_Clock())
    limiter.consume()
    limiter.consume()


def test_rate_limiter_rejects_when_saturated() -> None:
    clock = _Clock()
    limiter = SlidingWindowRateLimiter(limit=2, window_seconds=10, now_fn=clock)
    limiter.consume()
    clock.t = 4.0
    limiter.consume()

    with pytest.raises(RateLimitError) as exc:
        limiter.consume()
    assert exc.value.limit == 2
    assert exc.value.window_seconds == 10
    assert exc.value.retry_in == pytest.approx(6.0)


def test_rate_limiter_window_slides() -> None:
    clock = _Clock()
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=5, now_fn=clock)
    limiter.consume()
    clock.t = 5.0
    limiter.consume()


def test_rate_limiter_disabled() -> None:
    limiter = SlidingWindowRateLimiter(limit=0, window_seconds=10)
    assert limiter.enabled is False
    for _ in range(100):
        limiter.consume()


def test_select_rate_limiter_exempts_ping() -> None:
    messages = SlidingWindowRateLimiter(limit=1, window_seconds=1)
    interrupts = SlidingWindowRateLimiter(limit=1, window_seconds=1)
    assert select_rate_limiter("ping", messages, interrupts) == (None, "")
    assert select_rate_limiter("interrupt", messages, interrupts) == (interrupts, "interrupt")
    assert select_rate_limiter("audio-data", messages, interrupts) == (messages, "message")


@pytest.mark.asyncio
async def test_consume_limiter_sends_rate_limited_error() -> None:
    ws = FakeWebSocket()
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60, now_fn=_Clock())
    assert await consume_limiter(ws, limiter, "message") is True
    assert await consume_limiter(ws, limiter, "message") is False
    assert ws.sent[-1]["type"] == "error"
    assert ws.sent[-1]["code"] == "rate_limited"
