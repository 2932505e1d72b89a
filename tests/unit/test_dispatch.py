from __future__ import annotations

import base64
import asyncio
from types import SimpleNamespace

import pytest

from coach_voice.state.session import VoiceSession
from coach_voice.state.utterance import Utterance
from coach_voice.handlers.websocket.dispatch import HANDLERS

from fakes import FakeWebSocket


class _BlockingPipeline:
    def __init__(self) -> None:
        self.calls: list[Utterance] = []
        self.release = asyncio.Event()

    async def run(self, ws: FakeWebSocket, session: VoiceSession, utterance: Utterance) -> None:
        self.calls.append(utterance)
        try:
            await self.release.wait()
        finally:
            session.finish_utterance()


def _audio_msg(payload: bytes = b"\x00" * 500) -> dict[str, str]:
    return {"type": "audio-data", "audioData": "data:audio/webm;base64," + base64.b64encode(payload).decode()}


@pytest.mark.asyncio
async def test_activate_and_deactivate_report_status() -> None:
    ws = FakeWebSocket()
    session = VoiceSession(owner_id="u1")
    deps = SimpleNamespace(pipeline=_BlockingPipeline())

    await HANDLERS["activate"](ws, deps, session, {"type": "activate"})
    assert session.active is True
    await HANDLERS["deactivate"](ws, deps, session, {"type": "deactivate"})
    assert session.active is False
    assert [msg["active"] for msg in ws.of_type("status")] == [True, False]


@pytest.mark.asyncio
async def test_audio_while_inactive_is_ignored() -> None:
    ws = FakeWebSocket()
    pipeline = _BlockingPipeline()
    session = VoiceSession(owner_id="u1")

    await HANDLERS["audio-data"](ws, SimpleNamespace(pipeline=pipeline), session, _audio_msg())

    assert ws.sent == []
    assert pipeline.calls == []
    assert session.busy is False


@pytest.mark.asyncio
async def test_invalid_audio_payload_is_reported() -> None:
    ws = FakeWebSocket()
    session = VoiceSession(owner_id="u1")
    session.activate()
    deps = SimpleNamespace(pipeline=_BlockingPipeline())

    await HANDLERS["audio-data"](ws, deps, session, {"type": "audio-data", "audioData": "data:audio/webm;base64,%%"})
    await HANDLERS["audio-data"](ws, deps, session, {"type": "audio-data"})

    assert [msg["code"] for msg in ws.of_type("error")] == ["invalid_payload", "invalid_payload"]
    assert session.busy is False


@pytest.mark.asyncio
async def test_second_utterance_while_busy_is_dropped() -> None:
    ws = FakeWebSocket()
    pipeline = _BlockingPipeline()
    deps = SimpleNamespace(pipeline=pipeline)
    session = VoiceSession(owner_id="u1")
    session.activate()

    await HANDLERS["audio-data"](ws, deps, session, _audio_msg(b"\x01" * 500))
    task = session.pipeline_task
    assert task is not None
    await asyncio.sleep(0)
    await HANDLERS["audio-data"](ws, deps, session, _audio_msg(b"\x02" * 500))
    await asyncio.sleep(0)

    assert len(pipeline.calls) == 1
    assert pipeline.calls[0].audio == b"\x01" * 500
    assert pipeline.calls[0].mime_type == "audio/webm"

    pipeline.release.set()
    await task
    assert session.busy is False

    await HANDLERS["audio-data"](ws, deps, session, _audio_msg(b"\x03" * 500))
    assert session.busy is True
    third = session.pipeline_task
    assert third is not None
    await third
    assert len(pipeline.calls) == 2


@pytest.mark.asyncio
async def test_interrupt_and_deactivate_flag_the_in_flight_reply() -> None:
    ws = FakeWebSocket()
    pipeline = _BlockingPipeline()
    deps = SimpleNamespace(pipeline=pipeline)
    session = VoiceSession(owner_id="u1")
    session.activate()

    await HANDLERS["audio-data"](ws, deps, session, _audio_msg())
    task = session.pipeline_task
    reply = session.reply
    assert reply is not None and not reply.is_interrupted

    await HANDLERS["interrupt"](ws, deps, session, {"type": "interrupt"})
    assert reply.is_interrupted
    assert ws.sent == []

    await HANDLERS["deactivate"](ws, deps, session, {"type": "deactivate"})
    assert session.active is False
    assert ws.of_type("status")[-1]["active"] is False

    pipeline.release.set()
    await task


@pytest.mark.asyncio
async def test_interrupt_without_reply_is_harmless() -> None:
    ws = FakeWebSocket()
    session = VoiceSession(owner_id="u1")
    await HANDLERS["interrupt"](ws, SimpleNamespace(pipeline=None), session, {"type": "interrupt"})
    assert ws.sent == []
