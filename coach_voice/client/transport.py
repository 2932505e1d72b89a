"""Duplex WebSocket transport for the voice agent protocol.

Owns one `websockets` connection at a time. An unexpected close while the
user wants the agent active triggers a reconnect with capped exponential
backoff; once reconnected, `activate` is re-sent so the server-side state
matches what the user last asked for. A bad credential (close 1008, or an
`authentication_failed` error), `voice_unavailable`, and user-initiated closes
are never retried. A capacity rejection (1013) is retried with backoff.
"""

from __future__ import annotations

import base64
import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable, Awaitable
from urllib.parse import urlencode, urlsplit, urlunsplit

import orjson
import websockets
from websockets.exceptions import ConnectionClosed, InvalidHandshake

from coach_voice.config.websocket import (
    MSG_PING,
    MSG_ERROR,
    MSG_STATUS,
    MSG_CONNECTED,
    WS_KEY_TYPE,
    MSG_ACTIVATE,
    MSG_AUDIO_DATA,
    MSG_INTERRUPT,
    MSG_DEACTIVATE,
    WS_KEY_AUDIO_DATA,
    WS_TOKEN_QUERY_PARAM,
    WS_CLOSE_CLIENT_REQUEST_CODE,
)
from coach_voice.config.client import (
    WS_MAX_SIZE_BYTES,
    FATAL_CLOSE_CODES,
    FATAL_ERROR_CODES,
    WS_PING_TIMEOUT_S,
    WS_PING_INTERVAL_S,
    HEARTBEAT_INTERVAL_S,
    RECONNECT_MAX_DELAY_S,
    RECONNECT_BASE_DELAY_S,
)

logger = logging.getLogger(__name__)

MessageCallback = Callable[[dict[str, Any]], Awaitable[None]]
CloseCallback = Callable[[int | None, bool], Awaitable[None]]


def build_url(url: str, token: str) -> str:
    parts = urlsplit(url)
    query = f"{parts.query}&" if parts.query else ""
    query += urlencode({WS_TOKEN_QUERY_PARAM: token})
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def reconnect_delay(attempt: int, *, base_s: float, max_s: float) -> float:
    return min(max_s, base_s * (2**attempt))


class VoiceAgentTransport:
    def __init__(
        self,
        url: str,
        token: str,
        *,
        on_message: MessageCallback,
        on_close: CloseCallback | None = None,
        heartbeat_interval_s: float = HEARTBEAT_INTERVAL_S,
        reconnect_base_s: float = RECONNECT_BASE_DELAY_S,
        reconnect_max_s: float = RECONNECT_MAX_DELAY_S,
    ) -> None:
        self.url = build_url(url, token)
        self._on_message = on_message
        self._on_close = on_close
        self._heartbeat_interval_s = heartbeat_interval_s
        self._reconnect_base_s = reconnect_base_s
        self._reconnect_max_s = reconnect_max_s

        self._ws: Any = None
        self._task: asyncio.Task | None = None
        self._opened = asyncio.Event()
        self._closed_by_user = False
        self._admitted = False

        self.connected = False
        # What the server last reported vs what the user last asked for.
        self.active = False
        self.was_active = False
        self.connection_count = 0
        self.last_close_code: int | None = None
        self.last_error_code: str | None = None

    def _ws_options(self) -> dict[str, Any]:
        return {
            "ping_interval": WS_PING_INTERVAL_S,
            "ping_timeout": WS_PING_TIMEOUT_S,
            "max_size": WS_MAX_SIZE_BYTES,
        }

    async def start(self) -> None:
        if self._task is None:
            self._closed_by_user = False
            self._task = asyncio.create_task(self._run())

    async def wait_connected(self, timeout_s: float | None = None) -> None:
        await asyncio.wait_for(self._opened.wait(), timeout=timeout_s)

    async def close(self) -> None:
        self._closed_by_user = True
        self.was_active = False
        ws = self._ws
        if ws is not None:
            with contextlib.suppress(Exception):
                await ws.close(code=WS_CLOSE_CLIENT_REQUEST_CODE)
        task = self._task
        self._task = None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await task

    async def send(self, msg_type: str, **fields: Any) -> bool:
        ws = self._ws
        if ws is None:
            return False
        try:
            await ws.send(orjson.dumps({WS_KEY_TYPE: msg_type, **fields}).decode("utf-8"))
        except ConnectionClosed:
            return False
        return True

    async def activate(self) -> bool:
        self.was_active = True
        return await self.send(MSG_ACTIVATE)

    async def deactivate(self) -> bool:
        self.was_active = False
        return await self.send(MSG_DEACTIVATE)

    async def interrupt(self) -> bool:
        return await self.send(MSG_INTERRUPT)

    async def send_audio(self, audio: bytes, mime_type: str) -> bool:
        data_url = f"data:{mime_type};base64,{base64.b64encode(audio).decode('ascii')}"
        return await self.send(MSG_AUDIO_DATA, **{WS_KEY_AUDIO_DATA: data_url})

    async def _heartbeat(self) -> None:
        while True:
            await asyncio.sleep(self._heartbeat_interval_s)
            if not await self.send(MSG_PING):
                return

    async def _dispatch(self, raw: str | bytes) -> None:
        try:
            msg = orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.warning("ignoring non-JSON server frame")
            return
        if not isinstance(msg, dict):
            return
        msg_type = msg.get(WS_KEY_TYPE)
        if msg_type == MSG_CONNECTED:
            self._admitted = True
        elif msg_type == MSG_ERROR:
            self.last_error_code = msg.get("code")
        elif msg_type == MSG_STATUS:
            self.active = bool(msg.get("active"))
            # Server-side deactivation (idle, voice command) is what the user gets now.
            if not self.active:
                self.was_active = False
        await self._on_message(msg)

    async def _connect_once(self) -> int | None:
        """Run one connection until it closes; return the close code if known."""
        async with websockets.connect(self.url, **self._ws_options()) as ws:
            self._ws = ws
            self.connected = True
            self.connection_count += 1
            self.last_error_code = None
            self._admitted = False
            self._opened.set()
            logger.info("voice agent connected (connection #%s)", self.connection_count)
            if self.was_active:
                await self.send(MSG_ACTIVATE)

            heartbeat = asyncio.create_task(self._heartbeat())
            try:
                async for raw in ws:
                    await self._dispatch(raw)
            except ConnectionClosed:
                pass
            finally:
                heartbeat.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await heartbeat
            return ws.close_code

    async def _run(self) -> None:
        attempt = 0
        while not self._closed_by_user:
            close_code: int | None = None
            try:
                close_code = await self._connect_once()
                # A rejected connection (capacity) keeps backing off.
                if self._admitted:
                    attempt = 0
            except ConnectionClosed as exc:
                close_code = exc.rcvd.code if exc.rcvd is not None else None
            except (OSError, InvalidHandshake, TimeoutError) as exc:
                logger.warning("voice agent connection failed: %s", exc)
            finally:
                self._ws = None
                self.connected = False
                self.active = False
                self._opened.clear()

            self.last_close_code = close_code
            fatal = close_code in FATAL_CLOSE_CODES or self.last_error_code in FATAL_ERROR_CODES
            if self._on_close is not None and not self._closed_by_user:
                await self._on_close(close_code, fatal)
            if self._closed_by_user or fatal or not self.was_active:
                break

            delay = reconnect_delay(attempt, base_s=self._reconnect_base_s, max_s=self._reconnect_max_s)
            attempt += 1
            logger.info("voice agent reconnecting in %.1fs (attempt %s)", delay, attempt)
            await asyncio.sleep(delay)
        self._task = None


__all__ = ["VoiceAgentTransport", "build_url", "reconnect_delay"]
