"""ElevenLabs text-to-speech adapter."""

from __future__ import annotations

import httpx

from coach_voice.errors import CollaboratorError
from coach_voice.config.providers import ELEVENLABS_TTS_URL, ELEVENLABS_MODEL_ID, ELEVENLABS_VOICE_SETTINGS

from .http import raise_for_provider


class ElevenLabsSynthesizer:
    provider = "elevenlabs"

    def __init__(self, *, client: httpx.AsyncClient, api_key: str, voice_id: str) -> None:
        self._client = client
        self._api_key = api_key
        self._voice_id = voice_id

    async def synthesize(self, text: str) -> bytes:
        body = {
            "text": text,
            "model_id": ELEVENLABS_MODEL_ID,
            "voice_settings": dict(ELEVENLABS_VOICE_SETTINGS),
        }
        headers = {
            "xi-api-key": self._api_key,
            "Content-Type": "application/json",
            "Accept": "audio/mpeg",
        }
        try:
            response = await self._client.post(f"{ELEVENLABS_TTS_URL}/{self._voice_id}", headers=headers, json=body)
        except httpx.HTTPError as exc:
            raise CollaboratorError(self.provider, str(exc) or type(exc).__name__) from exc
        raise_for_provider(self.provider, response)
        return response.content


__all__ = ["ElevenLabsSynthesizer"]
