"""Runtime dependency construction (HTTP client, store, collaborators, pipeline)."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from coach_voice.state import RuntimeDeps
from coach_voice.state.settings import AppSettings
from coach_voice.store import PromptAssembler, ConversationStore
from coach_voice.pipeline.utterance import UtterancePipeline
from coach_voice.handlers.connections import ConnectionManager
from coach_voice.providers import DeepgramTranscriber, AnthropicCompletions, select_synthesizer
from coach_voice.providers.http import build_http_client

from .settings import load_settings

logger = logging.getLogger(__name__)


async def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()
    providers = settings.providers

    resource_stack = contextlib.AsyncExitStack()
    http_client = await resource_stack.enter_async_context(build_http_client(providers))

    store = ConversationStore(providers.database_path)
    await asyncio.to_thread(store.init_schema)

    transcriber = DeepgramTranscriber(client=http_client, api_key=providers.deepgram_api_key)
    synthesizer = select_synthesizer(providers, http_client)
    pipeline = UtterancePipeline(
        transcriber=transcriber,
        completions=AnthropicCompletions(client=http_client, api_key=providers.anthropic_api_key),
        synthesizer=synthesizer,
        prompts=PromptAssembler(store, settings.pipeline),
        min_utterance_bytes=settings.limits.min_utterance_bytes,
    )

    if not providers.voice_enabled:
        logger.warning("voice collaborators not fully configured; /voice-agent will reject connections")
    logger.info("runtime: database=%s", providers.database_path)

    return RuntimeDeps(
        connections=ConnectionManager(max_connections=settings.limits.max_concurrent_connections),
        pipeline=pipeline,
        transcriber=transcriber,
        synthesizer=synthesizer,
        settings=settings,
        _resource_stack=resource_stack,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
