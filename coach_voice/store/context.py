"""Prompt context assembly for voice replies."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from pathlib import Path

import orjson

from coach_voice.state.settings import PipelineSettings
from coach_voice.providers.base import CompletionRequest

from .conversations import ConversationStore

logger = logging.getLogger(__name__)

DEFAULT_MENTOR_PROMPT = (
    "You are the user's side-hustle mentor. You are speaking out loud, so keep replies short, "
    "conversational and free of markdown, lists or headings. Ground advice in the user's plan "
    "and today's tasks, and end with one concrete next step."
)


def load_mentor_prompt(path: Path | None) -> str:
    if path is None:
        return DEFAULT_MENTOR_PROMPT
    try:
        text = path.read_text(encoding="utf-8").strip()
    except OSError:
        logger.warning("mentor prompt %s unreadable; using built-in prompt", path)
        return DEFAULT_MENTOR_PROMPT
    return text or DEFAULT_MENTOR_PROMPT


def normalize_history(history: list[dict[str, str]]) -> list[dict[str, str]]:
    """Drop leading assistant turns and merge consecutive turns of the same role."""
    merged: list[dict[str, str]] = []
    for turn in history:
        if not merged and turn["role"] != "user":
            continue
        if merged and merged[-1]["role"] == turn["role"]:
            merged[-1] = {"role": turn["role"], "content": merged[-1]["content"] + "\n\n" + turn["content"]}
            continue
        merged.append(dict(turn))
    return merged


def build_system_prompt(base_prompt: str, user_context: dict[str, Any]) -> str:
    system = base_prompt
    if user_context:
        rendered = orjson.dumps(user_context, option=orjson.OPT_INDENT_2).decode("utf-8")
        system += "\n\n## Current User Context\n```json\n" + rendered + "\n```"
    return system


class PromptAssembler:
    """Builds a bounded completion request from the store's snapshot of the user."""

    def __init__(self, store: ConversationStore, settings: PipelineSettings) -> None:
        self._store = store
        self._settings = settings
        self._base_prompt = load_mentor_prompt(settings.mentor_prompt_path)

    def _assemble(self, owner_id: str, transcript: str) -> CompletionRequest:
        profile = self._store.user_profile(owner_id) or {}
        context = self._store.mentor_context(owner_id)
        history = self._store.recent_history(owner_id, self._settings.history_window)
        return CompletionRequest(
            system_prompt=build_system_prompt(self._base_prompt, context),
            model=profile.get("preferred_model") or self._settings.default_model,
            max_tokens=self._settings.max_tokens,
            messages=normalize_history([*history, {"role": "user", "content": transcript}]),
        )

    async def assemble(self, owner_id: str, transcript: str) -> CompletionRequest:
        return await asyncio.to_thread(self._assemble, owner_id, transcript)

    async def save_exchange(self, owner_id: str, transcript: str, reply_text: str) -> None:
        await asyncio.to_thread(self._store.save_exchange, owner_id, transcript, reply_text)


__all__ = ["DEFAULT_MENTOR_PROMPT", "PromptAssembler", "build_system_prompt", "load_mentor_prompt", "normalize_history"]
