"""Amplitude-threshold voice activity segmentation.

`process_sample()` is the whole state machine and is driven with explicit
timestamps so it can be exercised without a clock. `run()` polls the recorder
at a fixed interval and acts on the events it returns.
"""

from __future__ import annotations

import time
import asyncio
import logging
import contextlib
from collections.abc import Callable, Awaitable

from coach_voice.config.client import (
    VAD_MAX_SEGMENT_S,
    VAD_SILENCE_CLOSE_S,
    RECORDER_RETRY_MAX_S,
    VAD_SPEECH_THRESHOLD,
    RECORDER_RETRY_BASE_S,
    VAD_MIN_SEGMENT_BYTES,
    VAD_SAMPLE_INTERVAL_S,
    MICROPHONE_DENIED_MESSAGE,
)

from .base import Recorder

logger = logging.getLogger(__name__)

EVENT_SPEECH_START = "speech_start"
EVENT_SEGMENT_CLOSE = "segment_close"

SegmentCallback = Callable[[bytes, str], Awaitable[object]]
SpeechStartCallback = Callable[[], Awaitable[object]]
ErrorCallback = Callable[[str], None]


class VoiceActivitySegmenter:
    def __init__(
        self,
        recorder: Recorder,
        *,
        on_segment: SegmentCallback,
        on_speech_start: SpeechStartCallback | None = None,
        on_error: ErrorCallback | None = None,
        threshold: float = VAD_SPEECH_THRESHOLD,
        silence_close_s: float = VAD_SILENCE_CLOSE_S,
        max_segment_s: float = VAD_MAX_SEGMENT_S,
        min_segment_bytes: int = VAD_MIN_SEGMENT_BYTES,
        sample_interval_s: float = VAD_SAMPLE_INTERVAL_S,
        retry_base_s: float = RECORDER_RETRY_BASE_S,
        retry_max_s: float = RECORDER_RETRY_MAX_S,
        now_fn: Callable[[], float] | None = None,
    ) -> None:
        self._recorder = recorder
        self._on_segment = on_segment
        self._on_speech_start = on_speech_start
        self._on_error = on_error
        self._threshold = threshold
        self._silence_close_s = silence_close_s
        self._max_segment_s = max_segment_s
        self._min_segment_bytes = min_segment_bytes
        self._sample_interval_s = sample_interval_s
        self._retry_base_s = retry_base_s
        self._retry_max_s = retry_max_s
        self._now = now_fn or time.monotonic

        self._task: asyncio.Task | None = None
        self.inert = False
        self.reset(self._now())

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def reset(self, now: float) -> None:
        self.speaking = False
        self.heard_speech = False
        self.segment_started_at = now
        self.silence_started_at: float | None = None

    def process_sample(self, level: float, now: float) -> str | None:
        if level >= self._threshold:
            self.silence_started_at = None
            if not self.speaking:
                self.speaking = True
                self.heard_speech = True
                return EVENT_SPEECH_START
        elif self.speaking:
            self.speaking = False
            self.silence_started_at = now

        if now - self.segment_started_at >= self._max_segment_s:
            return EVENT_SEGMENT_CLOSE
        silence = self.silence_started_at
        if self.heard_speech and silence is not None and now - silence >= self._silence_close_s:
            return EVENT_SEGMENT_CLOSE
        return None

    async def _start_recorder(self) -> bool:
        """Start capture, retrying transient failures. False if the microphone is denied."""
        attempt = 0
        while True:
            try:
                await self._recorder.start()
            except PermissionError:
                logger.warning("microphone permission denied; segmenter is inert")
                self.inert = True
                if self._on_error is not None:
                    self._on_error(MICROPHONE_DENIED_MESSAGE)
                return False
            except (OSError, RuntimeError) as exc:
                delay = min(self._retry_max_s, self._retry_base_s * (2**attempt))
                attempt += 1
                logger.warning("recorder start failed (%s); retrying in %.1fs", exc, delay)
                await asyncio.sleep(delay)
                continue
            self.reset(self._now())
            return True

    async def _close_segment(self) -> None:
        heard_speech = self.heard_speech
        audio = await self._recorder.stop()
        if not await self._start_recorder():
            return
        if not heard_speech or len(audio) < self._min_segment_bytes:
            logger.debug("discarding segment: %s bytes, speech=%s", len(audio), heard_speech)
            return
        await self._on_segment(audio, self._recorder.mime_type)

    async def _run(self) -> None:
        if not await self._start_recorder():
            return
        while not self.inert:
            await asyncio.sleep(self._sample_interval_s)
            event = self.process_sample(self._recorder.level(), self._now())
            if event == EVENT_SPEECH_START and self._on_speech_start is not None:
                await self._on_speech_start()
            elif event == EVENT_SEGMENT_CLOSE:
                await self._close_segment()

    def start(self) -> None:
        if self.inert or self.running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await task
        if not self.inert:
            with contextlib.suppress(Exception):
                await self._recorder.stop()


__all__ = ["EVENT_SEGMENT_CLOSE", "EVENT_SPEECH_START", "VoiceActivitySegmenter"]
