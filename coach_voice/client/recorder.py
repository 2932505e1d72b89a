"""In-memory PCM16 recorder with RMS level metering."""

from __future__ import annotations

import io
import wave

import numpy as np

from coach_voice.config.client import PCM_MIME_TYPE, PCM_SAMPLE_RATE, PCM_SAMPLE_WIDTH

_INT16_FULL_SCALE = 32768.0


def rms_level(pcm: bytes) -> float:
    """Normalized RMS amplitude of little-endian PCM16 mono audio, in [0, 1]."""
    usable = len(pcm) - (len(pcm) % PCM_SAMPLE_WIDTH)
    if usable <= 0:
        return 0.0
    samples = np.frombuffer(pcm[:usable], dtype="<i2").astype(np.float32) / _INT16_FULL_SCALE
    return float(np.sqrt(np.mean(np.square(samples))))


def pcm_to_wav(pcm: bytes, *, sample_rate: int = PCM_SAMPLE_RATE) -> bytes:
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(PCM_SAMPLE_WIDTH)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm)
    return buf.getvalue()


class PcmRecorder:
    """Recorder fed by the caller's audio callback (`feed()`), e.g. a sounddevice stream."""

    mime_type = PCM_MIME_TYPE

    def __init__(self, *, sample_rate: int = PCM_SAMPLE_RATE) -> None:
        self.sample_rate = sample_rate
        self._frames: list[bytes] = []
        self._level = 0.0
        self.recording = False

    async def start(self) -> None:
        self._frames = []
        self._level = 0.0
        self.recording = True

    def feed(self, pcm: bytes) -> None:
        if not self.recording:
            return
        self._level = rms_level(pcm)
        self._frames.append(pcm)

    def level(self) -> float:
        return self._level

    async def stop(self) -> bytes:
        self.recording = False
        pcm = b"".join(self._frames)
        self._frames = []
        self._level = 0.0
        return pcm_to_wav(pcm, sample_rate=self.sample_rate)


__all__ = ["PcmRecorder", "pcm_to_wav", "rms_level"]
