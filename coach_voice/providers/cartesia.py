"""Cartesia `tts/bytes` adapter (MP3 output)."""

from __future__ import annotations

import httpx

from coach_voice.errors import CollaboratorError
from coach_voice.config.providers import CARTESIA_TTS_URL, CARTESIA_VERSION, CARTESIA_MODEL_ID, CARTESIA_SAMPLE_RATE

from .http import raise_for_provider


class CartesiaSynthesizer:
    provider = "cartesia"

    def __init__(self, *, client: httpx.AsyncClient, api_key: str, voice_id: str) -> None:
        self._client = client
        self._api_key = api_key
        self._voice_id = voice_id

    async def synthesize(self, text: str) -> bytes:
        body = {
            "model_id": CARTESIA_MODEL_ID,
            "transcript": text,
            "voice": {"mode": "id", "id": self._voice_id},
            "output_format": {"container": "mp3", "encoding": "mp3", "sample_rate": CARTESIA_SAMPLE_RATE},
        }
        headers = {
            "X-API-Key": self._api_key,
            "Cartesia-Version": CARTESIA_VERSION,
            "Content-Type": "application/json",
        }
        try:
            response = await self._client.post(CARTESIA_TTS_URL, headers=headers, json=body)
        except httpx.HTTPError as exc:
            raise CollaboratorError(self.provider, str(exc) or type(exc).__name__) from exc
        raise_for_provider(self.provider, response)
        return response.content


__all__ = ["CartesiaSynthesizer"]
