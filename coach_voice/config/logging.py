"""Logging configuration (env-resolved constants only)."""

from __future__ import annotations

import os

LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# httpx logs every collaborator request at INFO. Keep it quiet unless asked.
ENV_SHOW_HTTP_LOGS = "SHOW_HTTP_LOGS"
NOISY_HTTP_LOGGERS: tuple[str, ...] = ("httpx", "httpcore")

__all__ = ["ENV_SHOW_HTTP_LOGS", "LOG_FORMAT", "LOG_LEVEL", "NOISY_HTTP_LOGGERS"]
