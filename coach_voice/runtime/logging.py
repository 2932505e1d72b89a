"""Logging initialization."""

from __future__ import annotations

import os
import logging

from coach_voice.config.logging import LOG_LEVEL, LOG_FORMAT, NOISY_HTTP_LOGGERS, ENV_SHOW_HTTP_LOGS


def configure_logging() -> None:
    # httpx logs one INFO line per collaborator call. Keep it tame unless explicitly enabled.
    if (os.getenv(ENV_SHOW_HTTP_LOGS) or "").strip().lower() not in {"1", "true", "yes"}:
        for name in NOISY_HTTP_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


__all__ = ["configure_logging"]
