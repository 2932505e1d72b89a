"""Per-utterance orchestration: transcribe, generate, speak, persist.

One `UtterancePipeline` is shared by every connection; all per-turn state lives
in the session's `Reply`. Collaborator and processing errors stop at `run()`:
they are logged, reported to the client as a generic error, and the session
goes back to idle. Nothing here closes the socket.
"""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import TYPE_CHECKING

from fastapi import WebSocket

from coach_voice.errors import CollaboratorError
from coach_voice.state.reply import Reply
from coach_voice.state.session import VoiceSession
from coach_voice.state.utterance import Utterance
from coach_voice.config.pipeline import DEACTIVATION_ACK_TEXT, GENERIC_ERROR_MESSAGE
from coach_voice.handlers.websocket.errors import send_error, safe_send_message
from coach_voice.config.websocket import (
    MSG_STATUS,
    MSG_AUDIO_END,
    MSG_LISTENING,
    MSG_GENERATING,
    MSG_TEXT_CHUNK,
    MSG_TRANSCRIBING,
    MSG_TEXT_RESPONSE,
    MSG_SENTENCE_AUDIO,
    WS_ERROR_PROCESSING_FAILED,
)

from .audio import encode_audio
from .ordered import OrderedAudioSender
from .commands import is_deactivation_command
from .sentences import SentenceBuffer

if TYPE_CHECKING:
    from coach_voice.store.context import PromptAssembler
    from coach_voice.providers.base import SpeechToText, CompletionRequest, CompletionStreamer, SpeechSynthesizer

logger = logging.getLogger(__name__)

# Client-side 4xx from STT means the audio itself was unusable (noise, truncated
# container). Auth and quota failures are real errors.
_STT_FATAL_STATUS = frozenset({401, 403, 429})


def _is_rejected_audio(exc: CollaboratorError) -> bool:
    code = exc.status_code
    return code is not None and 400 <= code < 500 and code not in _STT_FATAL_STATUS


class UtterancePipeline:
    def __init__(
        self,
        *,
        transcriber: SpeechToText,
        completions: CompletionStreamer,
        synthesizer: SpeechSynthesizer,
        prompts: PromptAssembler,
        min_utterance_bytes: int,
    ) -> None:
        self._transcriber = transcriber
        self._completions = completions
        self._synthesizer = synthesizer
        self._prompts = prompts
        self._min_utterance_bytes = min_utterance_bytes

    async def run(self, ws: WebSocket, session: VoiceSession, utterance: Utterance) -> None:
        """Process one admitted utterance. The caller has already claimed `session.busy`."""
        reply = session.reply if session.reply is not None else Reply()
        try:
            await self._process(ws, session, utterance, reply)
        except asyncio.CancelledError:
            logger.info("utterance cancelled owner=%s", session.owner_id)
            raise
        except Exception:
            logger.exception("utterance processing failed owner=%s", session.owner_id)
            await send_error(ws, error_code=WS_ERROR_PROCESSING_FAILED, message=GENERIC_ERROR_MESSAGE)
        finally:
            session.finish_utterance()

    async def _transcribe(self, utterance: Utterance) -> str:
        try:
            transcript = await self._transcriber.transcribe(utterance.audio, mime_type=utterance.mime_type)
        except CollaboratorError as exc:
            if not _is_rejected_audio(exc):
                raise
            logger.info("transcriber rejected audio (%s bytes): %s", len(utterance.audio), exc)
            return ""
        return (transcript or "").strip()

    async def _process(self, ws: WebSocket, session: VoiceSession, utterance: Utterance, reply: Reply) -> None:
        if len(utterance.audio) < self._min_utterance_bytes:
            logger.debug("utterance below minimum size: %s bytes", len(utterance.audio))
            await safe_send_message(ws, MSG_LISTENING)
            return

        await safe_send_message(ws, MSG_TRANSCRIBING)
        transcript = await self._transcribe(utterance)
        utterance.transcript = transcript
        if not transcript or reply.is_interrupted:
            await safe_send_message(ws, MSG_LISTENING)
            return

        logger.info("transcribed owner=%s chars=%s", session.owner_id, len(transcript))

        if is_deactivation_command(transcript):
            await self._deactivate_by_voice(ws, session, reply)
            return

        await safe_send_message(ws, MSG_GENERATING, transcript=transcript)
        request = await self._prompts.assemble(session.owner_id, transcript)
        await self._generate(ws, request, reply)

        if reply.is_interrupted:
            logger.info(
                "reply interrupted owner=%s sentences=%s chars=%s",
                session.owner_id,
                len(reply.sentences),
                len(reply.text),
            )
            await safe_send_message(ws, MSG_LISTENING)
        else:
            await safe_send_message(ws, MSG_TEXT_RESPONSE, text=reply.text)
            await safe_send_message(ws, MSG_AUDIO_END)

        await self._prompts.save_exchange(session.owner_id, transcript, reply.text)

    async def _generate(self, ws: WebSocket, request: CompletionRequest, reply: Reply) -> None:
        sentences = SentenceBuffer()

        async def emit(audio: bytes) -> None:
            reply.audio_fragments.append(audio)
            await safe_send_message(ws, MSG_SENTENCE_AUDIO, data=encode_audio(audio))

        sender = OrderedAudioSender(self._synthesizer.synthesize, emit, reply.interrupted)
        drain_task = asyncio.create_task(sender.drain())

        def submit(sentence: str) -> None:
            reply.sentences.append(sentence)
            sender.submit(sentence)

        async def on_delta(text: str) -> None:
            if reply.is_interrupted:
                return
            reply.text += text
            await safe_send_message(ws, MSG_TEXT_CHUNK, text=text)
            for sentence in sentences.feed(text):
                submit(sentence)

        def should_stop() -> bool:
            # A finished drain before close() means synthesis failed.
            return reply.is_interrupted or drain_task.done()

        try:
            await self._completions.stream(request, on_delta, should_stop=should_stop)
            if not reply.is_interrupted:
                tail = sentences.flush()
                if tail:
                    submit(tail)
            sender.close()
            await drain_task
        except asyncio.CancelledError:
            drain_task.cancel()
            await sender.cancel_outstanding()
            raise
        except Exception:
            sender.close()
            drain_task.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await drain_task
            sender.discard_outstanding()
            raise
        sender.discard_outstanding()

    async def _deactivate_by_voice(self, ws: WebSocket, session: VoiceSession, reply: Reply) -> None:
        session.deactivate()
        logger.info("deactivated by voice command owner=%s", session.owner_id)
        await safe_send_message(ws, MSG_STATUS, active=False, message=DEACTIVATION_ACK_TEXT)
        await safe_send_message(ws, MSG_TEXT_RESPONSE, text=DEACTIVATION_ACK_TEXT)
        try:
            audio = await self._synthesizer.synthesize(DEACTIVATION_ACK_TEXT)
        except Exception:
            # The deactivation already happened; the spoken ack is optional.
            logger.warning("deactivation ack synthesis failed owner=%s", session.owner_id, exc_info=True)
            return
        if reply.is_interrupted:
            return
        await safe_send_message(ws, MSG_SENTENCE_AUDIO, data=encode_audio(audio))
        await safe_send_message(ws, MSG_AUDIO_END)


__all__ = ["UtterancePipeline"]
