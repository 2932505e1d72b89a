"""Text-to-speech provider selection (Cartesia preferred, ElevenLabs fallback)."""

from __future__ import annotations

import logging

import httpx

from coach_voice.state.settings import ProviderSettings

from .base import SpeechSynthesizer
from .cartesia import CartesiaSynthesizer
from .elevenlabs import ElevenLabsSynthesizer
from .unavailable import UnavailableSynthesizer

logger = logging.getLogger(__name__)


def select_synthesizer(settings: ProviderSettings, client: httpx.AsyncClient) -> SpeechSynthesizer:
    if settings.cartesia_api_key:
        return CartesiaSynthesizer(
            client=client,
            api_key=settings.cartesia_api_key,
            voice_id=settings.cartesia_voice_id,
        )
    if settings.elevenlabs_api_key:
        return ElevenLabsSynthesizer(
            client=client,
            api_key=settings.elevenlabs_api_key,
            voice_id=settings.elevenlabs_voice_id,
        )
    logger.warning("no TTS provider configured; voice replies are unavailable")
    return UnavailableSynthesizer()


__all__ = ["select_synthesizer"]
