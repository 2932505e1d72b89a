"""Rate limiting utilities for WebSocket message handling."""

from __future__ import annotations

import math
import logging

from fastapi import WebSocket

from coach_voice.errors import RateLimitError
from coach_voice.handlers.limits import SlidingWindowRateLimiter
from coach_voice.config.websocket import MSG_PING, MSG_INTERRUPT, WS_ERROR_RATE_LIMITED

from .errors import send_error

logger = logging.getLogger(__name__)


def select_rate_limiter(
    msg_type: str,
    message_limiter: SlidingWindowRateLimiter,
    interrupt_limiter: SlidingWindowRateLimiter,
) -> tuple[SlidingWindowRateLimiter | None, str]:
    if msg_type == MSG_INTERRUPT:
        return interrupt_limiter, "interrupt"
    if msg_type == MSG_PING:
        return None, ""
    return message_limiter, "message"


async def consume_limiter(ws: WebSocket, limiter: SlidingWindowRateLimiter, label: str) -> bool:
    try:
        limiter.consume()
    except RateLimitError as exc:
        retry_in_s = int(max(1, math.ceil(exc.retry_in))) if exc.retry_in else 1
        logger.info("%s rate limit hit; retry in %ss", label, retry_in_s)
        await send_error(
            ws,
            error_code=WS_ERROR_RATE_LIMITED,
            message=(
                f"{label} rate limit: at most {limiter.limit} per {int(limiter.window_seconds)} seconds; "
                f"retry in {retry_in_s} seconds"
            ),
        )
        return False
    return True


__all__ = ["consume_limiter", "select_rate_limiter"]
