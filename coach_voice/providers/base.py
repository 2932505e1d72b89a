"""Narrow contracts for the external STT / LLM / TTS collaborators."""

from __future__ import annotations

from typing import Protocol
from dataclasses import field, dataclass
from collections.abc import Callable, Awaitable

DeltaCallback = Callable[[str], Awaitable[None]]
StopCheck = Callable[[], bool]


@dataclass(frozen=True, slots=True)
class CompletionRequest:
    system_prompt: str
    model: str
    max_tokens: int
    messages: list[dict[str, str]] = field(default_factory=list)


class SpeechToText(Protocol):
    async def transcribe(self, audio: bytes, *, mime_type: str) -> str:
        """Return the transcript, or an empty string for unintelligible audio."""
        ...


class CompletionStreamer(Protocol):
    async def stream(
        self,
        request: CompletionRequest,
        on_delta: DeltaCallback,
        *,
        should_stop: StopCheck | None = None,
    ) -> str:
        """Stream a completion through `on_delta` and return the full text."""
        ...


class SpeechSynthesizer(Protocol):
    async def synthesize(self, text: str) -> bytes: ...


__all__ = [
    "CompletionRequest",
    "CompletionStreamer",
    "DeltaCallback",
    "SpeechSynthesizer",
    "SpeechToText",
    "StopCheck",
]
