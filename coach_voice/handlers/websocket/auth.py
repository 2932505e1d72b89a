"""Bearer credential helpers shared by the WebSocket and HTTP surfaces."""

from __future__ import annotations

import logging

import jwt
from starlette.requests import HTTPConnection

from coach_voice.config.websocket import WS_TOKEN_QUERY_PARAM
from coach_voice.config.secrets import JWT_ALGORITHM, JWT_OWNER_CLAIMS

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "


def get_token(conn: HTTPConnection) -> str:
    # Query param is easiest for WS clients; browsers cannot set WS headers.
    token = (conn.query_params.get(WS_TOKEN_QUERY_PARAM) or "").strip()
    if token:
        return token
    header = (conn.headers.get("authorization") or "").strip()
    if header.lower().startswith(_BEARER_PREFIX):
        return header[len(_BEARER_PREFIX) :].strip()
    return ""


def verify_token(token: str, secret: str) -> str | None:
    """Return the owner id carried by a valid token, else None."""
    if not token or not secret:
        # Misconfiguration: server has no secret set. Treat as locked down.
        return None
    try:
        claims = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError as exc:
        logger.info("rejected bearer credential: %s", exc)
        return None
    for claim in JWT_OWNER_CLAIMS:
        owner = claims.get(claim)
        if owner is not None and str(owner).strip():
            return str(owner).strip()
    return None


def authenticate(conn: HTTPConnection, secret: str) -> str | None:
    return verify_token(get_token(conn), secret)


__all__ = ["authenticate", "get_token", "verify_token"]
