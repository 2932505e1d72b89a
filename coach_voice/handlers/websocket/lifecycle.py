"""Per-connection activation watchdog (idle deactivation)."""

from __future__ import annotations

import time
import asyncio
import logging
import contextlib
from collections.abc import Callable, Awaitable

from coach_voice.state.session import VoiceSession
from coach_voice.config.websocket import DEFAULT_WS_IDLE_TIMEOUT_S, DEFAULT_WS_WATCHDOG_TICK_S

logger = logging.getLogger(__name__)

IdleCallback = Callable[[], Awaitable[object]]


class WebSocketLifecycle:
    """Deactivate an active session that has been quiet for too long.

    Only activation is affected; the socket stays open. A session that is
    inactive or currently processing an utterance is never timed out.
    """

    def __init__(
        self,
        session: VoiceSession,
        *,
        on_idle: IdleCallback,
        idle_timeout_s: float | None = None,
        watchdog_tick_s: float | None = None,
        now_fn: Callable[[], float] | None = None,
    ) -> None:
        self._session = session
        self._on_idle = on_idle
        self._idle_timeout_s = float(DEFAULT_WS_IDLE_TIMEOUT_S if idle_timeout_s is None else idle_timeout_s)
        self._watchdog_tick_s = float(DEFAULT_WS_WATCHDOG_TICK_S if watchdog_tick_s is None else watchdog_tick_s)
        self._now = now_fn or time.monotonic
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    def is_idle(self) -> bool:
        session = self._session
        if self._idle_timeout_s <= 0 or not session.active or session.busy:
            return False
        return self._now() >= session.idle_deadline(self._idle_timeout_s)

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._watchdog_loop())
        return self._task

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await self._task
        self._task = None

    async def _watchdog_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(self._watchdog_tick_s)
                if self._stop_event.is_set():
                    break
                if not self.is_idle():
                    continue
                self._session.deactivate()
                logger.info(
                    "session idle for %.0fs; deactivated owner=%s",
                    self._idle_timeout_s,
                    self._session.owner_id,
                )
                await self._on_idle()
        except asyncio.CancelledError:
            return
        except Exception:
            logger.debug("idle watchdog exiting due to unexpected error", exc_info=True)


__all__ = ["WebSocketLifecycle"]
