"""High-level voice agent client: transport, segmenter and playback wired together."""

from __future__ import annotations

import base64
import logging
import binascii
from typing import Any

from coach_voice.config.client import CONNECTION_ERROR_MESSAGE
from coach_voice.config.websocket import (
    MSG_ERROR,
    MSG_STATUS,
    WS_KEY_TYPE,
    MSG_AUDIO_END,
    MSG_CONNECTED,
    MSG_LISTENING,
    MSG_GENERATING,
    MSG_TEXT_CHUNK,
    MSG_TRANSCRIBING,
    MSG_TEXT_RESPONSE,
    MSG_SENTENCE_AUDIO,
)

from .base import Recorder, AudioPlayer
from .playback import PlaybackQueue
from .segmenter import VoiceActivitySegmenter
from .transport import VoiceAgentTransport

logger = logging.getLogger(__name__)


class VoiceAgentClient:
    """Client-side view of one voice session.

    Server status drives capture: the segmenter runs only while the server
    reports the session active. Local speech onset during playback flushes the
    queue, which in turn sends `interrupt`.
    """

    def __init__(
        self,
        url: str,
        token: str,
        *,
        recorder: Recorder,
        player: AudioPlayer,
        **transport_options: Any,
    ) -> None:
        self.transport = VoiceAgentTransport(
            url,
            token,
            on_message=self.handle_message,
            on_close=self._on_close,
            **transport_options,
        )
        self.playback = PlaybackQueue(
            player,
            on_interrupt=self.transport.interrupt,
            on_speaking_change=self._on_speaking,
        )
        self.segmenter = VoiceActivitySegmenter(
            recorder,
            on_segment=self.transport.send_audio,
            on_speech_start=self._on_speech_start,
            on_error=self._on_error,
        )

        self.is_active = False
        self.is_listening = False
        self.is_speaking = False
        self.error: str | None = None
        self.last_transcript = ""
        self.last_response = ""
        self.partial_response = ""
        # Set by barge-in; fragments still in flight for the cut reply are dropped.
        self._drop_reply_audio = False

    @property
    def is_connected(self) -> bool:
        return self.transport.connected

    async def connect(self, timeout_s: float | None = None) -> None:
        self.error = None
        await self.transport.start()
        await self.transport.wait_connected(timeout_s)

    async def activate(self) -> None:
        if not await self.transport.activate():
            self.error = "Not connected to voice agent"

    async def deactivate(self) -> None:
        await self.transport.deactivate()
        await self._stop_capture()

    async def close(self) -> None:
        await self._stop_capture()
        await self.playback.flush(notify=False)
        await self.transport.close()

    def clear_error(self) -> None:
        self.error = None

    def _on_speaking(self, speaking: bool) -> None:
        self.is_speaking = speaking

    def _on_error(self, message: str) -> None:
        self.error = message

    async def _on_speech_start(self) -> None:
        if self.playback.is_speaking or self.playback.pending:
            logger.info("barge-in: flushing playback")
            await self.playback.flush()
            self._drop_reply_audio = True

    async def _on_close(self, close_code: int | None, fatal: bool) -> None:
        self.is_active = False
        self.is_listening = False
        if fatal:
            self.error = CONNECTION_ERROR_MESSAGE
            await self._stop_capture()

    async def _stop_capture(self) -> None:
        self.is_listening = False
        await self.segmenter.stop()

    async def _on_status(self, msg: dict[str, Any]) -> None:
        self.is_active = bool(msg.get("active"))
        self.is_listening = self.is_active
        if self.is_active:
            self.segmenter.start()
        else:
            await self._stop_capture()

    def _on_sentence_audio(self, msg: dict[str, Any]) -> None:
        if self._drop_reply_audio:
            return
        try:
            audio = base64.b64decode(msg.get("data") or "", validate=True)
        except (binascii.Error, ValueError):
            logger.warning("dropping undecodable sentence audio")
            return
        self.playback.enqueue(audio)

    async def handle_message(self, msg: dict[str, Any]) -> None:
        msg_type = msg.get(WS_KEY_TYPE)
        if msg_type == MSG_STATUS:
            await self._on_status(msg)
        elif msg_type == MSG_CONNECTED:
            self.error = None
        elif msg_type == MSG_TRANSCRIBING:
            self.is_listening = False
            self._drop_reply_audio = False
            self.partial_response = ""
        elif msg_type == MSG_GENERATING:
            self._drop_reply_audio = False
            self.last_transcript = str(msg.get("transcript") or "")
        elif msg_type == MSG_TEXT_CHUNK:
            self.partial_response += str(msg.get("text") or "")
        elif msg_type == MSG_SENTENCE_AUDIO:
            self._on_sentence_audio(msg)
        elif msg_type == MSG_TEXT_RESPONSE:
            self.last_response = str(msg.get("text") or "")
            self.partial_response = ""
        elif msg_type in (MSG_AUDIO_END, MSG_LISTENING):
            self.is_listening = self.is_active
        elif msg_type == MSG_ERROR:
            self.error = str(msg.get("message") or CONNECTION_ERROR_MESSAGE)
            self.is_listening = self.is_active


__all__ = ["VoiceAgentClient"]
