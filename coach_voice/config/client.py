"""Client-side capture, playback and transport constants."""

from __future__ import annotations

from .websocket import WS_ERROR_AUTH_FAILED, WS_ERROR_VOICE_UNAVAILABLE

# Voice activity segmentation
VAD_SAMPLE_INTERVAL_S: float = 0.05
VAD_SPEECH_THRESHOLD: float = 0.02
VAD_SILENCE_CLOSE_S: float = 1.5
VAD_MAX_SEGMENT_S: float = 30.0
VAD_MIN_SEGMENT_BYTES: int = 1000

# Recorder start retries
RECORDER_RETRY_BASE_S: float = 0.5
RECORDER_RETRY_MAX_S: float = 5.0

# Transport
HEARTBEAT_INTERVAL_S: float = 25.0
RECONNECT_BASE_DELAY_S: float = 1.0
RECONNECT_MAX_DELAY_S: float = 30.0

# Close codes the client must not retry (bad credential). 1013 is "try again later" and is retried.
FATAL_CLOSE_CODES: frozenset[int] = frozenset({1008})

# Server error codes that make the following close terminal whatever its code.
FATAL_ERROR_CODES: frozenset[str] = frozenset({WS_ERROR_AUTH_FAILED, WS_ERROR_VOICE_UNAVAILABLE})

# Disable the websockets library keepalive; we send explicit {"type":"ping"} frames.
WS_PING_INTERVAL_S: float | None = None
WS_PING_TIMEOUT_S: float | None = None
WS_MAX_SIZE_BYTES: int = 8 * 1024 * 1024

# PCM recorder
PCM_SAMPLE_RATE: int = 16000
PCM_SAMPLE_WIDTH: int = 2
PCM_MIME_TYPE: str = "audio/wav"

MICROPHONE_DENIED_MESSAGE = "Microphone access denied or not available"
CONNECTION_ERROR_MESSAGE = "Connection error occurred"

__all__ = [
    "CONNECTION_ERROR_MESSAGE",
    "FATAL_CLOSE_CODES",
    "FATAL_ERROR_CODES",
    "HEARTBEAT_INTERVAL_S",
    "MICROPHONE_DENIED_MESSAGE",
    "PCM_MIME_TYPE",
    "PCM_SAMPLE_RATE",
    "PCM_SAMPLE_WIDTH",
    "RECONNECT_BASE_DELAY_S",
    "RECONNECT_MAX_DELAY_S",
    "RECORDER_RETRY_BASE_S",
    "RECORDER_RETRY_MAX_S",
    "VAD_MAX_SEGMENT_S",
    "VAD_MIN_SEGMENT_BYTES",
    "VAD_SAMPLE_INTERVAL_S",
    "VAD_SILENCE_CLOSE_S",
    "VAD_SPEECH_THRESHOLD",
    "WS_MAX_SIZE_BYTES",
    "WS_PING_INTERVAL_S",
    "WS_PING_TIMEOUT_S",
]
