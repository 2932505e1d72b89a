"""Spoken control phrases recognized in transcripts."""

from __future__ import annotations

from coach_voice.config.pipeline import DEACTIVATION_PHRASES


def is_deactivation_command(transcript: str, phrases: tuple[str, ...] = DEACTIVATION_PHRASES) -> bool:
    lowered = (transcript or "").lower()
    return any(phrase in lowered for phrase in phrases)


__all__ = ["is_deactivation_command"]
