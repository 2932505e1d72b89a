from __future__ import annotations

import asyncio

import pytest

from coach_voice.client.segmenter import EVENT_SPEECH_START, EVENT_SEGMENT_CLOSE, VoiceActivitySegmenter


class _Recorder:
    mime_type = "audio/webm"

    def __init__(self, *, audio: bytes = b"\x00" * 2000, start_errors: list[Exception] | None = None) -> None:
        self.audio = audio
        self.start_errors = list(start_errors or [])
        self.starts = 0
        self.stops = 0
        self.current_level = 0.0

    async def start(self) -> None:
        if self.start_errors:
            raise self.start_errors.pop(0)
        self.starts += 1

    def level(self) -> float:
        return self.current_level

    async def stop(self) -> bytes:
        self.stops += 1
        return self.audio


async def _ignore_segment(audio: bytes, mime_type: str) -> None:
    return None


def _segmenter(recorder: _Recorder | None = None, **kwargs) -> VoiceActivitySegmenter:
    options = {"threshold": 0.1, "silence_close_s": 1.5, "max_segment_s": 30.0, "now_fn": lambda: 0.0}
    options.update(kwargs)
    options.setdefault("on_segment", _ignore_segment)
    return VoiceActivitySegmenter(recorder or _Recorder(), **options)


def test_speech_then_silence_closes_segment() -> None:
    vad = _segmenter()

    assert vad.process_sample(0.0, 0.5) is None
    assert vad.process_sample(0.4, 1.0) == EVENT_SPEECH_START
    assert vad.process_sample(0.5, 1.1) is None
    assert vad.process_sample(0.01, 2.0) is None
    assert vad.process_sample(0.01, 3.0) is None
    assert vad.process_sample(0.01, 3.5) == EVENT_SEGMENT_CLOSE


def test_speech_resuming_restarts_silence_timer() -> None:
    vad = _segmenter()

    vad.process_sample(0.4, 1.0)
    vad.process_sample(0.0, 2.0)
    assert vad.process_sample(0.4, 3.0) == EVENT_SPEECH_START
    assert vad.process_sample(0.0, 3.2) is None
    assert vad.process_sample(0.0, 4.6) is None
    assert vad.process_sample(0.0, 4.7) == EVENT_SEGMENT_CLOSE


def test_silence_alone_never_closes_before_cap() -> None:
    vad = _segmenter()
    for second in range(1, 30):
        assert vad.process_sample(0.0, float(second)) is None
    assert vad.process_sample(0.0, 30.0) == EVENT_SEGMENT_CLOSE


def test_continuous_speech_is_capped() -> None:
    vad = _segmenter(max_segment_s=10.0)
    assert vad.process_sample(0.9, 0.1) == EVENT_SPEECH_START
    assert vad.process_sample(0.9, 9.9) is None
    assert vad.process_sample(0.9, 10.0) == EVENT_SEGMENT_CLOSE


@pytest.mark.asyncio
async def test_close_segment_delivers_audio_and_restarts() -> None:
    recorder = _Recorder()
    segments: list[tuple[bytes, str]] = []

    async def on_segment(audio: bytes, mime_type: str) -> None:
        segments.append((audio, mime_type))

    vad = _segmenter(recorder, on_segment=on_segment, min_segment_bytes=1000)
    vad.process_sample(0.5, 0.1)

    await vad._close_segment()

    assert segments == [(recorder.audio, "audio/webm")]
    assert recorder.stops == 1
    assert recorder.starts == 1
    assert vad.heard_speech is False


@pytest.mark.asyncio
async def test_close_segment_discards_small_or_silent_segments() -> None:
    segments: list[bytes] = []

    async def on_segment(audio: bytes, mime_type: str) -> None:
        segments.append(audio)

    small = _segmenter(_Recorder(audio=b"\x00" * 10), on_segment=on_segment, min_segment_bytes=1000)
    small.process_sample(0.5, 0.1)
    await small._close_segment()

    silent = _segmenter(_Recorder(), on_segment=on_segment, min_segment_bytes=1000)
    await silent._close_segment()

    assert segments == []


@pytest.mark.asyncio
async def test_permission_denied_makes_segmenter_inert() -> None:
    errors: list[str] = []
    recorder = _Recorder(start_errors=[PermissionError("denied")])
    vad = _segmenter(recorder, on_error=errors.append)

    vad.start()
    await asyncio.sleep(0.01)

    assert vad.inert is True
    assert vad.running is False
    assert errors == ["Microphone access denied or not available"]
    vad.start()
    assert vad.running is False


@pytest.mark.asyncio
async def test_transient_recorder_failures_are_retried() -> None:
    recorder = _Recorder(start_errors=[OSError("busy"), RuntimeError("device lost")])
    vad = _segmenter(recorder, retry_base_s=0.001, retry_max_s=0.002, sample_interval_s=0.01)

    vad.start()
    await asyncio.sleep(0.05)
    assert vad.running is True
    assert recorder.starts == 1

    await vad.stop()
    assert vad.running is False
    assert recorder.stops == 1


@pytest.mark.asyncio
async def test_run_loop_reports_speech_and_segments() -> None:
    recorder = _Recorder()
    clock = {"now": 0.0}
    speech_starts: list[bool] = []
    segments: list[bytes] = []

    async def on_speech_start() -> None:
        speech_starts.append(True)

    async def on_segment(audio: bytes, mime_type: str) -> None:
        segments.append(audio)

    vad = _segmenter(
        recorder,
        on_segment=on_segment,
        on_speech_start=on_speech_start,
        sample_interval_s=0.005,
        silence_close_s=0.5,
        now_fn=lambda: clock["now"],
    )
    vad.start()
    await asyncio.sleep(0.02)
    recorder.current_level = 0.8
    await asyncio.sleep(0.02)
    recorder.current_level = 0.0
    await asyncio.sleep(0.02)
    clock["now"] = 1.0
    await asyncio.sleep(0.05)
    await vad.stop()

    assert speech_starts == [True]
    assert segments == [recorder.audio]
