"""Pluggable audio device seams for the client."""

from __future__ import annotations

from typing import Protocol


class AudioPlayer(Protocol):
    async def play(self, audio: bytes) -> None:
        """Play one fragment, returning when it finishes."""
        ...

    async def stop(self) -> None:
        """Halt whatever is currently playing."""
        ...


class Recorder(Protocol):
    mime_type: str

    async def start(self) -> None: ...

    def level(self) -> float:
        """Current normalized amplitude in [0, 1]."""
        ...

    async def stop(self) -> bytes:
        """Stop capturing and return the encoded segment."""
        ...


__all__ = ["AudioPlayer", "Recorder"]
