"""Shared helpers for the end-to-end scripts: server URL and bearer token."""

from __future__ import annotations

import os
import time

import jwt

DEFAULT_SERVER = "127.0.0.1:8000"
WS_PATH = "/voice-agent"


def derive_default_server() -> str:
    return os.getenv("COACH_VOICE_SERVER", DEFAULT_SERVER)


def mint_token(user_id: str, *, secret: str | None = None, ttl_s: int = 3600) -> str:
    """Sign a short-lived HS256 token with JWT_SECRET, the way the web app does."""
    secret = secret or os.getenv("JWT_SECRET") or ""
    if not secret:
        raise SystemExit("JWT_SECRET is not set; cannot mint a test token")
    now = int(time.time())
    return jwt.encode({"userId": user_id, "iat": now, "exp": now + ttl_s}, secret, algorithm="HS256")


def build_ws_url(server: str, *, secure: bool, token: str) -> str:
    if server.startswith(("ws://", "wss://")):
        base = server.rstrip("/")
    else:
        base = f"{'wss' if secure else 'ws'}://{server.rstrip('/')}"
    if not base.endswith(WS_PATH):
        base += WS_PATH
    return f"{base}?token={token}"


__all__ = ["build_ws_url", "derive_default_server", "mint_token"]
