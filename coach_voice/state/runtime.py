"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from coach_voice.state.settings import AppSettings
    from coach_voice.providers.base import SpeechToText, SpeechSynthesizer
    from coach_voice.pipeline.utterance import UtterancePipeline
    from coach_voice.handlers.connections import ConnectionManager


@dataclass(slots=True)
class RuntimeDeps:
    connections: ConnectionManager
    pipeline: UtterancePipeline
    transcriber: SpeechToText
    synthesizer: SpeechSynthesizer
    settings: AppSettings
    _resource_stack: Any

    @property
    def voice_enabled(self) -> bool:
        return self.settings.providers.voice_enabled

    async def shutdown(self) -> None:
        try:
            await self._resource_stack.aclose()
        except Exception:
            logger.exception("runtime shutdown failed")


__all__ = ["RuntimeDeps"]
