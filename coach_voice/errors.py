"""Shared error types for the voice agent server."""

from __future__ import annotations


class RateLimitError(Exception):
    """Raised when a sliding-window rate limiter is saturated."""

    def __init__(self, *, retry_in: float, limit: int, window_seconds: float) -> None:
        super().__init__(f"rate limit of {limit} per {window_seconds}s reached; retry in {retry_in:.2f}s")
        self.retry_in = retry_in
        self.limit = limit
        self.window_seconds = window_seconds


class CollaboratorError(Exception):
    """An external STT / LLM / TTS call failed."""

    def __init__(self, provider: str, message: str, *, status_code: int | None = None) -> None:
        super().__init__(provider, message, status_code)
        self.provider = provider
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return f"{self.provider}: {self.message}"
        return f"{self.provider} ({self.status_code}): {self.message}"


class VoiceUnavailableError(Exception):
    """Voice collaborators are not configured on this server."""


__all__ = ["CollaboratorError", "RateLimitError", "VoiceUnavailableError"]
