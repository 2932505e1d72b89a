"""Per-utterance reply state."""

from __future__ import annotations

import asyncio
from dataclasses import field, dataclass


@dataclass(slots=True)
class Reply:
    text: str = ""
    sentences: list[str] = field(default_factory=list)
    audio_fragments: list[bytes] = field(default_factory=list)
    interrupted: asyncio.Event = field(default_factory=asyncio.Event)

    @property
    def is_interrupted(self) -> bool:
        return self.interrupted.is_set()

    def interrupt(self) -> None:
        self.interrupted.set()


__all__ = ["Reply"]
