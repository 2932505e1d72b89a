"""Synthesizer used when no TTS service is configured."""

from __future__ import annotations

from coach_voice.errors import VoiceUnavailableError


class UnavailableSynthesizer:
    provider = "none"

    async def synthesize(self, text: str) -> bytes:
        raise VoiceUnavailableError("No TTS service configured. Set CARTESIA_API_KEY or ELEVENLABS_API_KEY.")


__all__ = ["UnavailableSynthesizer"]
