"""Ordered local playback of synthesized sentence audio."""

from __future__ import annotations

import asyncio
import logging
import contextlib
import collections
from dataclasses import dataclass
from collections.abc import Callable, Awaitable

from .base import AudioPlayer

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlaybackEntry:
    sequence: int
    audio: bytes


class PlaybackQueue:
    """FIFO of sentence audio with a single player task.

    `flush()` is the barge-in path: it stops the current fragment, drops the
    rest and tells the server to stop sending more.
    """

    def __init__(
        self,
        player: AudioPlayer,
        *,
        on_interrupt: Callable[[], Awaitable[object]] | None = None,
        on_speaking_change: Callable[[bool], None] | None = None,
    ) -> None:
        self._player = player
        self._on_interrupt = on_interrupt
        self._on_speaking_change = on_speaking_change
        self._queue: collections.deque[PlaybackEntry] = collections.deque()
        self._worker: asyncio.Task | None = None
        self._next_sequence = 0
        self._speaking = False
        self.played: list[int] = []

    @property
    def is_speaking(self) -> bool:
        return self._speaking

    @property
    def pending(self) -> int:
        return len(self._queue)

    def _set_speaking(self, speaking: bool) -> None:
        if speaking == self._speaking:
            return
        self._speaking = speaking
        if self._on_speaking_change is not None:
            self._on_speaking_change(speaking)

    def enqueue(self, audio: bytes) -> PlaybackEntry:
        entry = PlaybackEntry(sequence=self._next_sequence, audio=audio)
        self._next_sequence += 1
        self._queue.append(entry)
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._play_loop())
        return entry

    async def _play_loop(self) -> None:
        try:
            while self._queue:
                entry = self._queue.popleft()
                self._set_speaking(True)
                try:
                    await self._player.play(entry.audio)
                except asyncio.CancelledError:
                    raise
                except Exception:
                    logger.warning("playback of fragment %s failed", entry.sequence, exc_info=True)
                    continue
                self.played.append(entry.sequence)
        finally:
            self._set_speaking(False)

    async def wait_idle(self) -> None:
        worker = self._worker
        if worker is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await worker

    async def flush(self, *, notify: bool = True) -> None:
        self._queue.clear()
        worker = self._worker
        self._worker = None
        if worker is not None and not worker.done():
            worker.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await worker
            with contextlib.suppress(Exception):
                await self._player.stop()
        self._set_speaking(False)
        if notify and self._on_interrupt is not None:
            await self._on_interrupt()


__all__ = ["PlaybackEntry", "PlaybackQueue"]
