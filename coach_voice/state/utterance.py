"""One captured user turn."""

from __future__ import annotations

import time
from dataclasses import field, dataclass


@dataclass(slots=True)
class Utterance:
    audio: bytes
    mime_type: str
    captured_at: float = field(default_factory=time.time)
    transcript: str | None = None


__all__ = ["Utterance"]
