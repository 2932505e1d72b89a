"""Secrets and authentication configuration (env variable names only)."""

from __future__ import annotations

ENV_JWT_SECRET = "JWT_SECRET"
ENV_DEEPGRAM_API_KEY = "DEEPGRAM_API_KEY"
ENV_ANTHROPIC_API_KEY = "ANTHROPIC_API_KEY"
ENV_CARTESIA_API_KEY = "CARTESIA_API_KEY"
ENV_ELEVENLABS_API_KEY = "ELEVENLABS_API_KEY"

JWT_ALGORITHM = "HS256"

# Claims that may carry the session owner, in lookup order.
JWT_OWNER_CLAIMS: tuple[str, ...] = ("userId", "sub")

__all__ = [
    "ENV_ANTHROPIC_API_KEY",
    "ENV_CARTESIA_API_KEY",
    "ENV_DEEPGRAM_API_KEY",
    "ENV_ELEVENLABS_API_KEY",
    "ENV_JWT_SECRET",
    "JWT_ALGORITHM",
    "JWT_OWNER_CLAIMS",
]
