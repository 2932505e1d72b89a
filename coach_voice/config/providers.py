"""STT / LLM / TTS provider configuration (env names + defaults only)."""

from __future__ import annotations

DEEPGRAM_LISTEN_URL = "https://api.deepgram.com/v1/listen"
DEEPGRAM_MODEL = "nova-2"

# The turn has a user waiting on it; a failed completion is reported, not retried.
ANTHROPIC_MAX_RETRIES = 0

CARTESIA_TTS_URL = "https://api.cartesia.ai/tts/bytes"
CARTESIA_VERSION = "2024-06-10"
CARTESIA_MODEL_ID = "sonic-english"
CARTESIA_SAMPLE_RATE = 44100
ENV_CARTESIA_VOICE_ID = "CARTESIA_VOICE_ID"
DEFAULT_CARTESIA_VOICE_ID = "a0e99841-438c-4a64-b679-ae501e7d6091"

ELEVENLABS_TTS_URL = "https://api.elevenlabs.io/v1/text-to-speech"
ELEVENLABS_MODEL_ID = "eleven_turbo_v2_5"
ENV_ELEVENLABS_VOICE_ID = "ELEVENLABS_VOICE_ID"
DEFAULT_ELEVENLABS_VOICE_ID = "EXAVITQu4vr4xnSDxMaL"
ELEVENLABS_VOICE_SETTINGS: dict[str, float] = {"stability": 0.5, "similarity_boost": 0.75, "style": 0.3}

DEFAULT_AUDIO_MIME_TYPE = "audio/webm"

ENV_HTTP_TIMEOUT_S = "PROVIDER_HTTP_TIMEOUT_S"
DEFAULT_HTTP_TIMEOUT_S = 30.0
ENV_HTTP_CONNECT_TIMEOUT_S = "PROVIDER_HTTP_CONNECT_TIMEOUT_S"
DEFAULT_HTTP_CONNECT_TIMEOUT_S = 5.0

ENV_DATABASE_PATH = "DATABASE_PATH"
DEFAULT_DATABASE_PATH = "coach.db"

__all__ = [
    "ANTHROPIC_MAX_RETRIES",
    "CARTESIA_MODEL_ID",
    "CARTESIA_SAMPLE_RATE",
    "CARTESIA_TTS_URL",
    "CARTESIA_VERSION",
    "DEEPGRAM_LISTEN_URL",
    "DEEPGRAM_MODEL",
    "DEFAULT_AUDIO_MIME_TYPE",
    "DEFAULT_CARTESIA_VOICE_ID",
    "DEFAULT_DATABASE_PATH",
    "DEFAULT_ELEVENLABS_VOICE_ID",
    "DEFAULT_HTTP_CONNECT_TIMEOUT_S",
    "DEFAULT_HTTP_TIMEOUT_S",
    "ELEVENLABS_MODEL_ID",
    "ELEVENLABS_TTS_URL",
    "ELEVENLABS_VOICE_SETTINGS",
    "ENV_CARTESIA_VOICE_ID",
    "ENV_DATABASE_PATH",
    "ENV_ELEVENLABS_VOICE_ID",
    "ENV_HTTP_CONNECT_TIMEOUT_S",
    "ENV_HTTP_TIMEOUT_S",
]
