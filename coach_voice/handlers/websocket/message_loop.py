"""WebSocket message loop for the voice agent (/voice-agent)."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

from coach_voice.state.runtime import RuntimeDeps
from coach_voice.state.session import VoiceSession
from coach_voice.handlers.limits import SlidingWindowRateLimiter
from coach_voice.config.websocket import MSG_PING, MSG_PONG, WS_KEY_TYPE, WS_ERROR_INVALID_MESSAGE

from .dispatch import HANDLERS
from .parser import parse_client_message
from .errors import send_error, safe_send_message
from .limits import consume_limiter, select_rate_limiter

logger = logging.getLogger(__name__)


async def _receive_text(ws: WebSocket) -> str | None:
    """Next text frame; None for a binary frame. Raises WebSocketDisconnect on close."""
    message = await ws.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(code=message.get("code", 1000), reason=message.get("reason"))
    return message.get("text")


async def _parse_or_send_error(ws: WebSocket, raw: str | None, max_bytes: int) -> dict[str, Any] | None:
    if raw is None:
        await send_error(ws, error_code=WS_ERROR_INVALID_MESSAGE, message="binary frames are not supported")
        return None
    try:
        return parse_client_message(raw, max_bytes=max_bytes)
    except ValueError as exc:
        await send_error(ws, error_code=WS_ERROR_INVALID_MESSAGE, message=str(exc))
        return None


async def run_message_loop(
    ws: WebSocket,
    session: VoiceSession,
    message_limiter: SlidingWindowRateLimiter,
    interrupt_limiter: SlidingWindowRateLimiter,
    runtime_deps: RuntimeDeps,
) -> None:
    max_bytes = runtime_deps.settings.websocket.max_message_bytes
    try:
        while True:
            raw = await _receive_text(ws)
            msg = await _parse_or_send_error(ws, raw, max_bytes)
            if msg is None:
                continue

            msg_type = msg[WS_KEY_TYPE]
            limiter, label = select_rate_limiter(msg_type, message_limiter, interrupt_limiter)
            if limiter is not None and not await consume_limiter(ws, limiter, label):
                continue

            # Heartbeat only; it must not count as activity for the idle timeout.
            if msg_type == MSG_PING:
                await safe_send_message(ws, MSG_PONG)
                continue

            handler = HANDLERS.get(msg_type)
            if handler is not None:
                await handler(ws, runtime_deps, session, msg)
                continue

            await send_error(
                ws,
                error_code=WS_ERROR_INVALID_MESSAGE,
                message=f"message type '{msg_type}' is not supported",
            )
    except WebSocketDisconnect as exc:
        logger.debug("client disconnected owner=%s code=%s", session.owner_id, exc.code)


__all__ = ["run_message_loop"]
