"""Admission control and rate limit configuration (env names + defaults only)."""

from __future__ import annotations

ENV_MAX_CONCURRENT_CONNECTIONS = "MAX_CONCURRENT_CONNECTIONS"
DEFAULT_MAX_CONCURRENT_CONNECTIONS = 100

# Voice sessions are chatty only around utterances; pings are exempt.
ENV_WS_MESSAGE_WINDOW_SECONDS = "WS_MESSAGE_WINDOW_SECONDS"
DEFAULT_WS_MESSAGE_WINDOW_SECONDS = 60.0
ENV_WS_MAX_MESSAGES_PER_WINDOW = "WS_MAX_MESSAGES_PER_WINDOW"
DEFAULT_WS_MAX_MESSAGES_PER_WINDOW = 600

ENV_WS_INTERRUPT_WINDOW_SECONDS = "WS_INTERRUPT_WINDOW_SECONDS"
DEFAULT_WS_INTERRUPT_WINDOW_SECONDS = 0.0
ENV_WS_MAX_INTERRUPTS_PER_WINDOW = "WS_MAX_INTERRUPTS_PER_WINDOW"
DEFAULT_WS_MAX_INTERRUPTS_PER_WINDOW = 120

# Anything smaller is a click or a breath, not an utterance.
ENV_MIN_UTTERANCE_BYTES = "MIN_UTTERANCE_BYTES"
DEFAULT_MIN_UTTERANCE_BYTES = 100

__all__ = [
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
    "DEFAULT_MIN_UTTERANCE_BYTES",
    "DEFAULT_WS_INTERRUPT_WINDOW_SECONDS",
    "DEFAULT_WS_MAX_INTERRUPTS_PER_WINDOW",
    "DEFAULT_WS_MAX_MESSAGES_PER_WINDOW",
    "DEFAULT_WS_MESSAGE_WINDOW_SECONDS",
    "ENV_MAX_CONCURRENT_CONNECTIONS",
    "ENV_MIN_UTTERANCE_BYTES",
    "ENV_WS_INTERRUPT_WINDOW_SECONDS",
    "ENV_WS_MAX_INTERRUPTS_PER_WINDOW",
    "ENV_WS_MAX_MESSAGES_PER_WINDOW",
    "ENV_WS_MESSAGE_WINDOW_SECONDS",
]
