"""Environment parsing for runtime settings.

Env names and defaults live in `coach_voice/config/*`; this module resolves
them into the frozen dataclasses the rest of the server consumes.
"""

from __future__ import annotations

import os
from pathlib import Path

from coach_voice.state.settings import (
    AppSettings,
    AuthSettings,
    LimitsSettings,
    PipelineSettings,
    ProviderSettings,
    WebSocketSettings,
)
from coach_voice.config.secrets import (
    ENV_JWT_SECRET,
    ENV_CARTESIA_API_KEY,
    ENV_DEEPGRAM_API_KEY,
    ENV_ANTHROPIC_API_KEY,
    ENV_ELEVENLABS_API_KEY,
)
from coach_voice.config.websocket import (
    ENV_WS_IDLE_TIMEOUT_S,
    ENV_WS_WATCHDOG_TICK_S,
    ENV_WS_MAX_MESSAGE_BYTES,
    DEFAULT_WS_IDLE_TIMEOUT_S,
    DEFAULT_WS_WATCHDOG_TICK_S,
    DEFAULT_WS_MAX_MESSAGE_BYTES,
)
from coach_voice.config.limits import (
    ENV_MIN_UTTERANCE_BYTES,
    DEFAULT_MIN_UTTERANCE_BYTES,
    ENV_WS_MESSAGE_WINDOW_SECONDS,
    ENV_MAX_CONCURRENT_CONNECTIONS,
    ENV_WS_MAX_MESSAGES_PER_WINDOW,
    ENV_WS_INTERRUPT_WINDOW_SECONDS,
    ENV_WS_MAX_INTERRUPTS_PER_WINDOW,
    DEFAULT_WS_MESSAGE_WINDOW_SECONDS,
    DEFAULT_MAX_CONCURRENT_CONNECTIONS,
    DEFAULT_WS_MAX_MESSAGES_PER_WINDOW,
    DEFAULT_WS_INTERRUPT_WINDOW_SECONDS,
    DEFAULT_WS_MAX_INTERRUPTS_PER_WINDOW,
)
from coach_voice.config.pipeline import (
    DEFAULT_MODEL,
    ENV_DEFAULT_MODEL,
    ENV_HISTORY_WINDOW,
    ENV_VOICE_MAX_TOKENS,
    DEFAULT_HISTORY_WINDOW,
    ENV_MENTOR_PROMPT_PATH,
    DEFAULT_VOICE_MAX_TOKENS,
)
from coach_voice.config.providers import (
    ENV_DATABASE_PATH,
    ENV_HTTP_TIMEOUT_S,
    DEFAULT_DATABASE_PATH,
    ENV_CARTESIA_VOICE_ID,
    DEFAULT_HTTP_TIMEOUT_S,
    ENV_ELEVENLABS_VOICE_ID,
    DEFAULT_CARTESIA_VOICE_ID,
    ENV_HTTP_CONNECT_TIMEOUT_S,
    DEFAULT_ELEVENLABS_VOICE_ID,
    DEFAULT_HTTP_CONNECT_TIMEOUT_S,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _path_env(name: str, default: Path | None) -> Path | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return Path(raw.strip()).expanduser()


def _load_auth_settings() -> AuthSettings:
    return AuthSettings(jwt_secret=(os.getenv(ENV_JWT_SECRET) or "").strip())


def _load_limits_settings() -> LimitsSettings:
    max_connections = max(1, _int_env(ENV_MAX_CONCURRENT_CONNECTIONS, DEFAULT_MAX_CONCURRENT_CONNECTIONS))
    msg_window = _float_env(ENV_WS_MESSAGE_WINDOW_SECONDS, DEFAULT_WS_MESSAGE_WINDOW_SECONDS)
    if msg_window <= 0:
        msg_window = DEFAULT_WS_MESSAGE_WINDOW_SECONDS
    msg_limit = _int_env(ENV_WS_MAX_MESSAGES_PER_WINDOW, DEFAULT_WS_MAX_MESSAGES_PER_WINDOW)
    interrupt_window = _float_env(ENV_WS_INTERRUPT_WINDOW_SECONDS, DEFAULT_WS_INTERRUPT_WINDOW_SECONDS)
    if interrupt_window <= 0:
        interrupt_window = msg_window
    interrupt_limit = _int_env(ENV_WS_MAX_INTERRUPTS_PER_WINDOW, DEFAULT_WS_MAX_INTERRUPTS_PER_WINDOW)

    return LimitsSettings(
        max_concurrent_connections=max_connections,
        ws_message_window_seconds=msg_window,
        ws_max_messages_per_window=msg_limit,
        ws_interrupt_window_seconds=interrupt_window,
        ws_max_interrupts_per_window=interrupt_limit,
        min_utterance_bytes=max(0, _int_env(ENV_MIN_UTTERANCE_BYTES, DEFAULT_MIN_UTTERANCE_BYTES)),
    )


def _load_websocket_settings() -> WebSocketSettings:
    return WebSocketSettings(
        idle_timeout_s=_float_env(ENV_WS_IDLE_TIMEOUT_S, DEFAULT_WS_IDLE_TIMEOUT_S),
        watchdog_tick_s=max(0.01, _float_env(ENV_WS_WATCHDOG_TICK_S, DEFAULT_WS_WATCHDOG_TICK_S)),
        max_message_bytes=_int_env(ENV_WS_MAX_MESSAGE_BYTES, DEFAULT_WS_MAX_MESSAGE_BYTES),
    )


def _load_pipeline_settings() -> PipelineSettings:
    return PipelineSettings(
        history_window=max(0, _int_env(ENV_HISTORY_WINDOW, DEFAULT_HISTORY_WINDOW)),
        max_tokens=max(1, _int_env(ENV_VOICE_MAX_TOKENS, DEFAULT_VOICE_MAX_TOKENS)),
        default_model=_str_env(ENV_DEFAULT_MODEL, DEFAULT_MODEL),
        mentor_prompt_path=_path_env(ENV_MENTOR_PROMPT_PATH, None),
    )


def _load_provider_settings() -> ProviderSettings:
    return ProviderSettings(
        deepgram_api_key=_str_env(ENV_DEEPGRAM_API_KEY, ""),
        anthropic_api_key=_str_env(ENV_ANTHROPIC_API_KEY, ""),
        cartesia_api_key=_str_env(ENV_CARTESIA_API_KEY, ""),
        cartesia_voice_id=_str_env(ENV_CARTESIA_VOICE_ID, DEFAULT_CARTESIA_VOICE_ID),
        elevenlabs_api_key=_str_env(ENV_ELEVENLABS_API_KEY, ""),
        elevenlabs_voice_id=_str_env(ENV_ELEVENLABS_VOICE_ID, DEFAULT_ELEVENLABS_VOICE_ID),
        http_timeout_s=_float_env(ENV_HTTP_TIMEOUT_S, DEFAULT_HTTP_TIMEOUT_S),
        http_connect_timeout_s=_float_env(ENV_HTTP_CONNECT_TIMEOUT_S, DEFAULT_HTTP_CONNECT_TIMEOUT_S),
        database_path=_path_env(ENV_DATABASE_PATH, Path(DEFAULT_DATABASE_PATH)) or Path(DEFAULT_DATABASE_PATH),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        auth=_load_auth_settings(),
        limits=_load_limits_settings(),
        websocket=_load_websocket_settings(),
        pipeline=_load_pipeline_settings(),
        providers=_load_provider_settings(),
    )


__all__ = ["load_settings"]
