"""Per-connection voice session state.

Owned by exactly one connection handler and discarded when it exits; nothing
here is shared across connections.
"""

from __future__ import annotations

import time
import asyncio
from dataclasses import field, dataclass

from .reply import Reply


@dataclass(slots=True)
class VoiceSession:
    owner_id: str
    connected: bool = True
    active: bool = False
    busy: bool = False
    last_activity: float = field(default_factory=time.monotonic)
    reply: Reply | None = None
    pipeline_task: asyncio.Task | None = None

    def touch(self) -> None:
        self.last_activity = time.monotonic()

    def idle_deadline(self, idle_timeout_s: float) -> float:
        return self.last_activity + idle_timeout_s

    def activate(self) -> None:
        self.active = True
        self.touch()

    def deactivate(self) -> bool:
        """Return True if the session was active before the call."""
        was_active = self.active
        self.active = False
        return was_active

    def try_begin_utterance(self) -> bool:
        """Admission gate: claim the busy flag, or refuse if already claimed."""
        if self.busy:
            return False
        self.busy = True
        self.reply = Reply()
        return True

    def finish_utterance(self) -> None:
        self.busy = False
        self.reply = None
        self.pipeline_task = None
        # Idle time is counted from the end of the last reply.
        self.touch()

    def interrupt(self) -> bool:
        """Flag the in-flight reply as interrupted. Return True if there was one."""
        if self.reply is None:
            return False
        self.reply.interrupt()
        return True


__all__ = ["VoiceSession"]
