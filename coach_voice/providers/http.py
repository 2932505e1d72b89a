"""Shared httpx helpers for collaborator adapters."""

from __future__ import annotations

import httpx

from coach_voice.errors import CollaboratorError
from coach_voice.state.settings import ProviderSettings

_ERROR_BODY_LIMIT = 500


def build_http_client(settings: ProviderSettings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_s, connect=settings.http_connect_timeout_s),
        limits=httpx.Limits(max_keepalive_connections=20, max_connections=100, keepalive_expiry=30.0),
    )


def raise_for_provider(provider: str, response: httpx.Response) -> None:
    if response.status_code < 400:
        return
    try:
        detail = response.text[:_ERROR_BODY_LIMIT]
    except Exception:
        detail = ""
    raise CollaboratorError(provider, detail or response.reason_phrase, status_code=response.status_code)


__all__ = ["build_http_client", "raise_for_provider"]
