"""In-order delivery of sentence audio whose synthesis completes out of order."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from collections.abc import Callable, Awaitable

logger = logging.getLogger(__name__)

SynthesizeFn = Callable[[str], Awaitable[bytes]]
EmitFn = Callable[[bytes], Awaitable[object]]


def _discard_result(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("discarded synthesis failed: %r", exc)


class OrderedAudioSender:
    """Fire-and-forget synthesis with a single in-order consumer.

    `submit()` starts synthesis immediately and appends the task to a list
    indexed by submission order. `drain()` walks that list strictly by index:
    fragment i is emitted only after it resolves, and never before i-1, no
    matter which synthesis call finishes first.

    Interruption is cooperative: once `interrupted` is set, nothing more is
    emitted and `drain()` returns. Tasks already submitted keep running; their
    results are dropped.
    """

    def __init__(self, synthesize: SynthesizeFn, emit: EmitFn, interrupted: asyncio.Event) -> None:
        self._synthesize = synthesize
        self._emit = emit
        self._interrupted = interrupted
        self._pending: list[asyncio.Task[bytes]] = []
        self._wakeup = asyncio.Event()
        self._closed = False
        self.emitted = 0

    @property
    def submitted(self) -> int:
        return len(self._pending)

    def submit(self, sentence: str) -> None:
        if self._closed:
            raise RuntimeError("sender is closed")
        self._pending.append(asyncio.create_task(self._synthesize(sentence)))
        self._wakeup.set()

    def close(self) -> None:
        """No more sentences will be submitted."""
        self._closed = True
        self._wakeup.set()

    async def _wait_or_interrupt(self, awaitable: asyncio.Future) -> bool:
        """Wait for `awaitable` unless interrupted first. True if it completed."""
        stop = asyncio.ensure_future(self._interrupted.wait())
        try:
            done, _ = await asyncio.wait({awaitable, stop}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop.cancel()
        return awaitable in done

    async def drain(self) -> int:
        index = 0
        while not self._interrupted.is_set():
            if index < len(self._pending):
                task = self._pending[index]
                if not await self._wait_or_interrupt(task):
                    break
                audio = task.result()
                if self._interrupted.is_set():
                    break
                await self._emit(audio)
                self.emitted += 1
                index += 1
                continue

            if self._closed:
                break

            self._wakeup.clear()
            waiter = asyncio.ensure_future(self._wakeup.wait())
            try:
                await self._wait_or_interrupt(waiter)
            finally:
                waiter.cancel()
        return index

    def discard_outstanding(self) -> None:
        """Let unfinished synthesis run to completion and drop whatever it yields."""
        for task in self._pending:
            if task.done():
                _discard_result(task)
            else:
                task.add_done_callback(_discard_result)

    async def cancel_outstanding(self) -> None:
        """Cancel unfinished synthesis; used only when the connection is going away."""
        for task in self._pending:
            if not task.done():
                task.cancel()
        for task in self._pending:
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await task


__all__ = ["OrderedAudioSender"]
