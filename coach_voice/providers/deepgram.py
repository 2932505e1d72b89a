"""Deepgram pre-recorded transcription."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from coach_voice.errors import CollaboratorError, VoiceUnavailableError
from coach_voice.config.providers import DEEPGRAM_MODEL, DEEPGRAM_LISTEN_URL, DEFAULT_AUDIO_MIME_TYPE

from .http import raise_for_provider

logger = logging.getLogger(__name__)

_PROVIDER = "deepgram"


def extract_transcript(data: Any) -> str:
    """Pull the first alternative's transcript out of a Deepgram response body."""
    try:
        transcript = data["results"]["channels"][0]["alternatives"][0]["transcript"]
    except (KeyError, IndexError, TypeError):
        return ""
    return transcript if isinstance(transcript, str) else ""


class DeepgramTranscriber:
    def __init__(self, *, client: httpx.AsyncClient, api_key: str, model: str = DEEPGRAM_MODEL) -> None:
        self._client = client
        self._api_key = api_key
        self._model = model

    async def transcribe(self, audio: bytes, *, mime_type: str = DEFAULT_AUDIO_MIME_TYPE) -> str:
        if not self._api_key:
            raise VoiceUnavailableError("Deepgram API key not configured")
        try:
            response = await self._client.post(
                DEEPGRAM_LISTEN_URL,
                params={"model": self._model, "smart_format": "true"},
                headers={"Authorization": f"Token {self._api_key}", "Content-Type": mime_type},
                content=audio,
            )
        except httpx.HTTPError as exc:
            raise CollaboratorError(_PROVIDER, str(exc) or type(exc).__name__) from exc
        raise_for_provider(_PROVIDER, response)
        try:
            data = response.json()
        except ValueError as exc:
            raise CollaboratorError(_PROVIDER, "response was not JSON") from exc
        transcript = extract_transcript(data)
        logger.debug("deepgram transcript chars=%s audio_bytes=%s", len(transcript), len(audio))
        return transcript


__all__ = ["DeepgramTranscriber", "extract_transcript"]
