"""Utterance pipeline configuration (env names + defaults only)."""

from __future__ import annotations

import re

# Voice mode keeps context small: only the last few turns.
ENV_HISTORY_WINDOW = "VOICE_HISTORY_WINDOW"
DEFAULT_HISTORY_WINDOW = 5

ENV_VOICE_MAX_TOKENS = "VOICE_MAX_TOKENS"
DEFAULT_VOICE_MAX_TOKENS = 1024

ENV_DEFAULT_MODEL = "VOICE_DEFAULT_MODEL"
DEFAULT_MODEL = "claude-sonnet-4-20250514"

ENV_MENTOR_PROMPT_PATH = "MENTOR_PROMPT_PATH"

DEFAULT_MENTOR_PERSONALITY = "balanced"

# Matched as case-insensitive substrings of the transcript.
DEACTIVATION_PHRASES: tuple[str, ...] = ("stop listening", "deactivate", "turn off")
DEACTIVATION_ACK_TEXT = "Voice agent deactivated."

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."

# Sentence-ending punctuation followed by whitespace, or a blank line.
SENTENCE_BOUNDARY_RE = re.compile(r"[.!?]+[\"')\]]*\s+|\n\s*\n")

CONTEXT_TYPE_MENTOR = "mentor"
INPUT_MODE_VOICE = "voice"

__all__ = [
    "CONTEXT_TYPE_MENTOR",
    "DEACTIVATION_ACK_TEXT",
    "DEACTIVATION_PHRASES",
    "DEFAULT_HISTORY_WINDOW",
    "DEFAULT_MENTOR_PERSONALITY",
    "DEFAULT_MODEL",
    "DEFAULT_VOICE_MAX_TOKENS",
    "ENV_DEFAULT_MODEL",
    "ENV_HISTORY_WINDOW",
    "ENV_MENTOR_PROMPT_PATH",
    "ENV_VOICE_MAX_TOKENS",
    "GENERIC_ERROR_MESSAGE",
    "INPUT_MODE_VOICE",
    "SENTENCE_BOUNDARY_RE",
]
