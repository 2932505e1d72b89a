from __future__ import annotations

import io
import wave
import base64

import numpy as np
import orjson
import pytest

from coach_voice.config.client import PCM_SAMPLE_RATE, VAD_MAX_SEGMENT_S
from coach_voice.client.recorder import PcmRecorder, rms_level, pcm_to_wav
from coach_voice.config.websocket import DEFAULT_WS_MAX_MESSAGE_BYTES
from coach_voice.handlers.websocket.parser import parse_client_message


def _tone(amplitude: float, samples: int = 1600) -> bytes:
    t = np.arange(samples, dtype=np.float32)
    wave_data = amplitude * np.sin(2 * np.pi * 440 * t / 16000)
    return (wave_data * 32767).astype("<i2").tobytes()


def test_rms_level_tracks_amplitude() -> None:
    assert rms_level(b"") == 0.0
    assert rms_level(b"\x00" * 320) == 0.0
    quiet = rms_level(_tone(0.05))
    loud = rms_level(_tone(0.8))
    assert 0.0 < quiet < loud <= 1.0
    assert loud == pytest.approx(0.8 / np.sqrt(2), rel=0.05)


def test_rms_level_ignores_trailing_odd_byte() -> None:
    assert rms_level(_tone(0.5) + b"\x7f") == pytest.approx(rms_level(_tone(0.5)))


def test_pcm_to_wav_wraps_mono_pcm16() -> None:
    pcm = _tone(0.3, samples=800)
    with wave.open(io.BytesIO(pcm_to_wav(pcm)), "rb") as wav:
        assert wav.getnchannels() == 1
        assert wav.getsampwidth() == 2
        assert wav.getframerate() == 16000
        assert wav.readframes(wav.getnframes()) == pcm


@pytest.mark.asyncio
async def test_recorder_collects_frames_between_start_and_stop() -> None:
    recorder = PcmRecorder()
    recorder.feed(_tone(0.5))
    assert recorder.level() == 0.0

    await recorder.start()
    recorder.feed(_tone(0.5, samples=400))
    recorder.feed(_tone(0.5, samples=400))
    assert recorder.level() > 0.1

    audio = await recorder.stop()
    assert recorder.level() == 0.0
    with wave.open(io.BytesIO(audio), "rb") as wav:
        assert wav.getnframes() == 800
    assert recorder.mime_type == "audio/wav"


@pytest.mark.asyncio
async def test_full_length_segment_fits_inbound_message_limit() -> None:
    recorder = PcmRecorder()
    await recorder.start()
    second = _tone(0.5, samples=PCM_SAMPLE_RATE)
    for _ in range(int(VAD_MAX_SEGMENT_S)):
        recorder.feed(second)
    audio = await recorder.stop()

    data_url = f"data:{recorder.mime_type};base64,{base64.b64encode(audio).decode('ascii')}"
    frame = orjson.dumps({"type": "audio-data", "audioData": data_url}).decode("utf-8")

    msg = parse_client_message(frame, max_bytes=DEFAULT_WS_MAX_MESSAGE_BYTES)
    assert msg["type"] == "audio-data"
