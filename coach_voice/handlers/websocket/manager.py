"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from fastapi import WebSocket

from coach_voice.state.runtime import RuntimeDeps
from coach_voice.state.session import VoiceSession
from coach_voice.handlers.limits import SlidingWindowRateLimiter
from coach_voice.config.websocket import (
    MSG_STATUS,
    MSG_CONNECTED,
    CONNECTED_MESSAGE,
    WS_ERROR_AUTH_FAILED,
    IDLE_DEACTIVATED_MESSAGE,
    WS_ERROR_VOICE_UNAVAILABLE,
    WS_ERROR_SERVER_AT_CAPACITY,
    WS_CLOSE_TRY_AGAIN_LATER_CODE,
    WS_CLOSE_POLICY_VIOLATION_CODE,
)

from .auth import authenticate
from .lifecycle import WebSocketLifecycle
from .message_loop import run_message_loop
from .errors import reject_connection, safe_send_message

logger = logging.getLogger(__name__)


def _create_rate_limiters(runtime_deps: RuntimeDeps) -> tuple[SlidingWindowRateLimiter, SlidingWindowRateLimiter]:
    message_limiter = SlidingWindowRateLimiter(
        limit=runtime_deps.settings.limits.ws_max_messages_per_window,
        window_seconds=runtime_deps.settings.limits.ws_message_window_seconds,
    )
    interrupt_limiter = SlidingWindowRateLimiter(
        limit=runtime_deps.settings.limits.ws_max_interrupts_per_window,
        window_seconds=runtime_deps.settings.limits.ws_interrupt_window_seconds,
    )
    return message_limiter, interrupt_limiter


async def _prepare_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> str | None:
    """Authenticate and admit. Returns the owner id, or None after rejecting."""
    owner_id = authenticate(ws, runtime_deps.settings.auth.jwt_secret)
    if owner_id is None:
        await reject_connection(
            ws,
            error_code=WS_ERROR_AUTH_FAILED,
            message="Authentication required. Provide a valid token via the 'token' query parameter.",
            close_code=WS_CLOSE_POLICY_VIOLATION_CODE,
        )
        return None

    if not runtime_deps.voice_enabled:
        await reject_connection(
            ws,
            error_code=WS_ERROR_VOICE_UNAVAILABLE,
            message="Voice features are not configured on this server.",
            close_code=WS_CLOSE_TRY_AGAIN_LATER_CODE,
        )
        return None

    if not await runtime_deps.connections.connect(ws, owner_id):
        await reject_connection(
            ws,
            error_code=WS_ERROR_SERVER_AT_CAPACITY,
            message="Server cannot accept new connections. Please try again later.",
            close_code=WS_CLOSE_TRY_AGAIN_LATER_CODE,
        )
        return None

    try:
        await ws.accept()
    except Exception:
        with contextlib.suppress(Exception):
            await runtime_deps.connections.disconnect(ws)
        raise
    return owner_id


async def _release_session(session: VoiceSession) -> None:
    session.connected = False
    session.interrupt()
    task = session.pipeline_task
    if task is not None and not task.done():
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await task


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    lifecycle: WebSocketLifecycle | None = None
    session: VoiceSession | None = None
    try:
        owner_id = await _prepare_connection(ws, runtime_deps)
        if owner_id is None:
            return
        session = VoiceSession(owner_id=owner_id)

        async def _on_idle() -> None:
            await safe_send_message(ws, MSG_STATUS, active=False, message=IDLE_DEACTIVATED_MESSAGE)

        lifecycle = WebSocketLifecycle(
            session,
            on_idle=_on_idle,
            idle_timeout_s=runtime_deps.settings.websocket.idle_timeout_s,
            watchdog_tick_s=runtime_deps.settings.websocket.watchdog_tick_s,
        )
        lifecycle.start()

        message_limiter, interrupt_limiter = _create_rate_limiters(runtime_deps)

        logger.info(
            "WebSocket connection accepted owner=%s (owner connections: %s). Active: %s",
            owner_id,
            runtime_deps.connections.count_for_owner(owner_id),
            runtime_deps.connections.get_connection_count(),
        )
        await safe_send_message(ws, MSG_CONNECTED, message=CONNECTED_MESSAGE)
        await run_message_loop(ws, session, message_limiter, interrupt_limiter, runtime_deps)
    finally:
        if lifecycle is not None:
            with contextlib.suppress(Exception):
                await lifecycle.stop()

        if session is not None:
            await _release_session(session)
            with contextlib.suppress(Exception):
                await runtime_deps.connections.disconnect(ws)
            logger.info(
                "WebSocket connection closed owner=%s. Active: %s",
                session.owner_id,
                runtime_deps.connections.get_connection_count(),
            )


__all__ = ["handle_websocket_connection"]
