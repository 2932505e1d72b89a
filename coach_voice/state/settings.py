"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthSettings:
    jwt_secret: str


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int
    ws_message_window_seconds: float
    ws_max_messages_per_window: int
    ws_interrupt_window_seconds: float
    ws_max_interrupts_per_window: int
    min_utterance_bytes: int


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    idle_timeout_s: float
    watchdog_tick_s: float
    max_message_bytes: int


@dataclass(frozen=True, slots=True)
class PipelineSettings:
    history_window: int
    max_tokens: int
    default_model: str
    mentor_prompt_path: Path | None


@dataclass(frozen=True, slots=True)
class ProviderSettings:
    deepgram_api_key: str
    anthropic_api_key: str
    cartesia_api_key: str
    cartesia_voice_id: str
    elevenlabs_api_key: str
    elevenlabs_voice_id: str
    http_timeout_s: float
    http_connect_timeout_s: float
    database_path: Path

    @property
    def voice_enabled(self) -> bool:
        has_tts = bool(self.cartesia_api_key or self.elevenlabs_api_key)
        return bool(self.deepgram_api_key and self.anthropic_api_key) and has_tts


@dataclass(frozen=True, slots=True)
class AppSettings:
    auth: AuthSettings
    limits: LimitsSettings
    websocket: WebSocketSettings
    pipeline: PipelineSettings
    providers: ProviderSettings


__all__ = [
    "AppSettings",
    "AuthSettings",
    "LimitsSettings",
    "PipelineSettings",
    "ProviderSettings",
    "WebSocketSettings",
]
