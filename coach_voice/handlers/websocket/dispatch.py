"""Dispatch handlers for client control and audio messages."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from collections.abc import Callable, Awaitable

from fastapi import WebSocket

from coach_voice.state.runtime import RuntimeDeps
from coach_voice.state.session import VoiceSession
from coach_voice.state.utterance import Utterance
from coach_voice.pipeline.audio import decode_audio_data_url
from coach_voice.config.websocket import (
    MSG_STATUS,
    MSG_ACTIVATE,
    MSG_INTERRUPT,
    MSG_AUDIO_DATA,
    MSG_DEACTIVATE,
    WS_KEY_AUDIO_DATA,
    WS_ERROR_INVALID_PAYLOAD,
)

from .errors import send_error, safe_send_message

logger = logging.getLogger(__name__)

HandlerFn = Callable[[WebSocket, RuntimeDeps, VoiceSession, dict[str, Any]], Awaitable[None]]


async def _handle_activate(
    ws: WebSocket,
    _runtime_deps: RuntimeDeps,
    session: VoiceSession,
    _msg: dict[str, Any],
) -> None:
    session.activate()
    logger.info("session activated owner=%s", session.owner_id)
    await safe_send_message(ws, MSG_STATUS, active=True)


async def _handle_deactivate(
    ws: WebSocket,
    _runtime_deps: RuntimeDeps,
    session: VoiceSession,
    _msg: dict[str, Any],
) -> None:
    session.deactivate()
    if session.interrupt():
        logger.info("deactivate interrupted in-flight reply owner=%s", session.owner_id)
    logger.info("session deactivated owner=%s", session.owner_id)
    await safe_send_message(ws, MSG_STATUS, active=False)


async def _handle_interrupt(
    _ws: WebSocket,
    _runtime_deps: RuntimeDeps,
    session: VoiceSession,
    _msg: dict[str, Any],
) -> None:
    if session.interrupt():
        logger.info("reply interrupted by client owner=%s", session.owner_id)


async def _handle_audio_data(
    ws: WebSocket,
    runtime_deps: RuntimeDeps,
    session: VoiceSession,
    msg: dict[str, Any],
) -> None:
    if not session.active:
        logger.debug("audio-data while inactive ignored owner=%s", session.owner_id)
        return

    audio_data = msg.get(WS_KEY_AUDIO_DATA)
    if not isinstance(audio_data, str) or not audio_data.strip():
        await send_error(ws, error_code=WS_ERROR_INVALID_PAYLOAD, message="audioData (base64 data URL) is required")
        return
    try:
        audio, mime_type = decode_audio_data_url(audio_data)
    except ValueError as exc:
        await send_error(ws, error_code=WS_ERROR_INVALID_PAYLOAD, message=str(exc))
        return

    session.touch()
    if not session.try_begin_utterance():
        logger.info("utterance dropped while busy owner=%s bytes=%s", session.owner_id, len(audio))
        return

    utterance = Utterance(audio=audio, mime_type=mime_type)
    session.pipeline_task = asyncio.create_task(runtime_deps.pipeline.run(ws, session, utterance))


HANDLERS: dict[str, HandlerFn] = {
    MSG_ACTIVATE: _handle_activate,
    MSG_DEACTIVATE: _handle_deactivate,
    MSG_INTERRUPT: _handle_interrupt,
    MSG_AUDIO_DATA: _handle_audio_data,
}

__all__ = ["HANDLERS"]
