from __future__ import annotations

from pathlib import Path

import pytest

from coach_voice.runtime.settings import load_settings

_ENV_NAMES = (
    "JWT_SECRET",
    "DEEPGRAM_API_KEY",
    "ANTHROPIC_API_KEY",
    "CARTESIA_API_KEY",
    "ELEVENLABS_API_KEY",
    "MAX_CONCURRENT_CONNECTIONS",
    "WS_MESSAGE_WINDOW_SECONDS",
    "WS_INTERRUPT_WINDOW_SECONDS",
    "WS_IDLE_TIMEOUT_S",
    "WS_WATCHDOG_TICK_S",
    "VOICE_HISTORY_WINDOW",
    "VOICE_DEFAULT_MODEL",
    "MENTOR_PROMPT_PATH",
    "DATABASE_PATH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_environment() -> None:
    settings = load_settings()

    assert settings.auth.jwt_secret == ""
    assert settings.limits.max_concurrent_connections == 100
    assert settings.limits.ws_interrupt_window_seconds == settings.limits.ws_message_window_seconds
    assert settings.websocket.idle_timeout_s == 300.0
    assert settings.pipeline.history_window == 5
    assert settings.pipeline.mentor_prompt_path is None
    assert settings.providers.database_path == Path("coach.db")
    assert settings.providers.voice_enabled is False


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", " s3cret ")
    monkeypatch.setenv("DEEPGRAM_API_KEY", "dg")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "an")
    monkeypatch.setenv("ELEVENLABS_API_KEY", "el")
    monkeypatch.setenv("MAX_CONCURRENT_CONNECTIONS", "0")
    monkeypatch.setenv("WS_IDLE_TIMEOUT_S", "0")
    monkeypatch.setenv("VOICE_HISTORY_WINDOW", "3")
    monkeypatch.setenv("VOICE_DEFAULT_MODEL", "claude-test")
    monkeypatch.setenv("MENTOR_PROMPT_PATH", "/etc/coach/mentor.md")
    monkeypatch.setenv("DATABASE_PATH", "/var/lib/coach/coach.db")

    settings = load_settings()

    assert settings.auth.jwt_secret == "s3cret"
    assert settings.limits.max_concurrent_connections == 1
    assert settings.websocket.idle_timeout_s == 0.0
    assert settings.pipeline.history_window == 3
    assert settings.pipeline.default_model == "claude-test"
    assert settings.pipeline.mentor_prompt_path == Path("/etc/coach/mentor.md")
    assert settings.providers.database_path == Path("/var/lib/coach/coach.db")
    assert settings.providers.voice_enabled is True


def test_malformed_numbers_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_CONCURRENT_CONNECTIONS", "lots")
    monkeypatch.setenv("WS_MESSAGE_WINDOW_SECONDS", "-5")
    monkeypatch.setenv("WS_WATCHDOG_TICK_S", "0")

    settings = load_settings()

    assert settings.limits.max_concurrent_connections == 100
    assert settings.limits.ws_message_window_seconds == 60.0
    assert settings.websocket.watchdog_tick_s == 0.01
