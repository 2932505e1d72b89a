"""Message and error helpers for the voice-agent WebSocket protocol."""

from __future__ import annotations

import logging
from typing import Any

import orjson
from fastapi import WebSocket, WebSocketDisconnect

from coach_voice.config.websocket import MSG_ERROR, WS_KEY_TYPE

logger = logging.getLogger(__name__)


def build_message(msg_type: str, **fields: Any) -> dict[str, Any]:
    return {WS_KEY_TYPE: msg_type, **fields}


def build_error_message(code: str, message: str) -> dict[str, Any]:
    return build_message(MSG_ERROR, message=message, code=code)


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def safe_send_message(ws: WebSocket, msg_type: str, **fields: Any) -> bool:
    data = build_message(msg_type, **fields)
    return await safe_send_text(ws, orjson.dumps(data).decode("utf-8"))


async def send_error(ws: WebSocket, *, error_code: str, message: str) -> bool:
    return await safe_send_text(ws, orjson.dumps(build_error_message(error_code, message)).decode("utf-8"))


async def reject_connection(
    ws: WebSocket,
    *,
    error_code: str,
    message: str,
    close_code: int,
) -> None:
    # Accept so we can send a structured error, then close.
    try:
        await ws.accept()
    except Exception:
        # If accept fails, nothing else to do.
        return
    await send_error(ws, error_code=error_code, message=message)
    try:
        await ws.close(code=close_code, reason=message[:120])
    except Exception:
        return


__all__ = [
    "build_error_message",
    "build_message",
    "reject_connection",
    "safe_send_message",
    "safe_send_text",
    "send_error",
]
