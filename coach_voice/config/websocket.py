"""WebSocket protocol configuration and constants."""

from __future__ import annotations

WS_ENDPOINT_PATH = "/voice-agent"

# Envelope keys
WS_KEY_TYPE = "type"
WS_KEY_AUDIO_DATA = "audioData"

# Auth transport
WS_TOKEN_QUERY_PARAM = "token"

# Close codes
WS_CLOSE_CLIENT_REQUEST_CODE = 1000
WS_CLOSE_POLICY_VIOLATION_CODE = 1008
WS_CLOSE_TRY_AGAIN_LATER_CODE = 1013

# Activation idle watchdog
ENV_WS_IDLE_TIMEOUT_S = "WS_IDLE_TIMEOUT_S"
DEFAULT_WS_IDLE_TIMEOUT_S = 5 * 60.0
ENV_WS_WATCHDOG_TICK_S = "WS_WATCHDOG_TICK_S"
DEFAULT_WS_WATCHDOG_TICK_S = 5.0

# Base64 data-URL audio inflates ~4/3. A full 30 s PCM16 WAV segment (~1.28MB encoded) must fit.
ENV_WS_MAX_MESSAGE_BYTES = "WS_MAX_MESSAGE_BYTES"
DEFAULT_WS_MAX_MESSAGE_BYTES = 2 * 1024 * 1024

# Client -> server message types
MSG_ACTIVATE = "activate"
MSG_DEACTIVATE = "deactivate"
MSG_PING = "ping"
MSG_INTERRUPT = "interrupt"
MSG_AUDIO_DATA = "audio-data"

# Server -> client message types
MSG_CONNECTED = "connected"
MSG_PONG = "pong"
MSG_STATUS = "status"
MSG_TRANSCRIBING = "transcribing"
MSG_GENERATING = "generating-response"
MSG_TEXT_CHUNK = "text-chunk"
MSG_SENTENCE_AUDIO = "sentence-audio"
MSG_TEXT_RESPONSE = "text-response"
MSG_AUDIO_END = "audio-end"
MSG_LISTENING = "listening"
MSG_ERROR = "error"

CONNECTED_MESSAGE = 'Voice agent ready. Send "activate" to begin.'
IDLE_DEACTIVATED_MESSAGE = "Deactivated due to inactivity"

# Errors (code values)
WS_ERROR_AUTH_FAILED = "authentication_failed"
WS_ERROR_SERVER_AT_CAPACITY = "server_at_capacity"
WS_ERROR_VOICE_UNAVAILABLE = "voice_unavailable"
WS_ERROR_INVALID_MESSAGE = "invalid_message"
WS_ERROR_INVALID_PAYLOAD = "invalid_payload"
WS_ERROR_RATE_LIMITED = "rate_limited"
WS_ERROR_PROCESSING_FAILED = "processing_failed"

__all__ = [
    "CONNECTED_MESSAGE",
    "DEFAULT_WS_IDLE_TIMEOUT_S",
    "DEFAULT_WS_MAX_MESSAGE_BYTES",
    "DEFAULT_WS_WATCHDOG_TICK_S",
    "ENV_WS_IDLE_TIMEOUT_S",
    "ENV_WS_MAX_MESSAGE_BYTES",
    "ENV_WS_WATCHDOG_TICK_S",
    "IDLE_DEACTIVATED_MESSAGE",
    "MSG_ACTIVATE",
    "MSG_AUDIO_DATA",
    "MSG_AUDIO_END",
    "MSG_CONNECTED",
    "MSG_DEACTIVATE",
    "MSG_ERROR",
    "MSG_GENERATING",
    "MSG_INTERRUPT",
    "MSG_LISTENING",
    "MSG_PING",
    "MSG_PONG",
    "MSG_SENTENCE_AUDIO",
    "MSG_STATUS",
    "MSG_TEXT_CHUNK",
    "MSG_TEXT_RESPONSE",
    "MSG_TRANSCRIBING",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_CLOSE_POLICY_VIOLATION_CODE",
    "WS_CLOSE_TRY_AGAIN_LATER_CODE",
    "WS_ENDPOINT_PATH",
    "WS_ERROR_AUTH_FAILED",
    "WS_ERROR_INVALID_MESSAGE",
    "WS_ERROR_INVALID_PAYLOAD",
    "WS_ERROR_PROCESSING_FAILED",
    "WS_ERROR_RATE_LIMITED",
    "WS_ERROR_SERVER_AT_CAPACITY",
    "WS_ERROR_VOICE_UNAVAILABLE",
    "WS_KEY_AUDIO_DATA",
    "WS_KEY_TYPE",
    "WS_TOKEN_QUERY_PARAM",
]
