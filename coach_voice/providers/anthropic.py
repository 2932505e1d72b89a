"""Anthropic Messages API streamed completion via the official SDK."""

from __future__ import annotations

import logging

import httpx
import anthropic

from coach_voice.errors import CollaboratorError
from coach_voice.config.providers import ANTHROPIC_MAX_RETRIES

from .base import StopCheck, DeltaCallback, CompletionRequest

logger = logging.getLogger(__name__)

_PROVIDER = "anthropic"


class AnthropicCompletions:
    def __init__(self, *, client: httpx.AsyncClient, api_key: str) -> None:
        self._http_client = client
        self._api_key = api_key
        self._sdk: anthropic.AsyncAnthropic | None = None

    def _get_sdk(self) -> anthropic.AsyncAnthropic:
        # Built lazily so a missing key never reaches the SDK constructor.
        if self._sdk is None:
            self._sdk = anthropic.AsyncAnthropic(
                api_key=self._api_key,
                http_client=self._http_client,
                max_retries=ANTHROPIC_MAX_RETRIES,
            )
        return self._sdk

    async def stream(
        self,
        request: CompletionRequest,
        on_delta: DeltaCallback,
        *,
        should_stop: StopCheck | None = None,
    ) -> str:
        if not self._api_key:
            raise CollaboratorError(_PROVIDER, "ANTHROPIC_API_KEY not set")

        kwargs = {
            "model": request.model,
            "max_tokens": request.max_tokens,
            "messages": request.messages,
        }
        if request.system_prompt:
            kwargs["system"] = request.system_prompt

        full_text = ""
        try:
            async with self._get_sdk().messages.stream(**kwargs) as stream:
                async for text in stream.text_stream:
                    if should_stop is not None and should_stop():
                        logger.debug("completion stream stopped early")
                        break
                    if not text:
                        continue
                    full_text += text
                    await on_delta(text)
        except anthropic.APIStatusError as exc:
            # In-stream `error` events surface with the 200 of the open response.
            status = exc.status_code if exc.status_code >= 400 else None
            raise CollaboratorError(_PROVIDER, str(exc.message)[:500], status_code=status) from exc
        except anthropic.APIError as exc:
            raise CollaboratorError(_PROVIDER, str(exc) or type(exc).__name__) from exc
        return full_text


__all__ = ["AnthropicCompletions"]
