from __future__ import annotations

import asyncio

import pytest

from coach_voice.pipeline.ordered import OrderedAudioSender


def _synth_with_delays(delays: dict[str, float]):
    finished: list[str] = []

    async def synthesize(text: str) -> bytes:
        await asyncio.sleep(delays.get(text, 0.0))
        finished.append(text)
        return text.encode()

    return synthesize, finished


@pytest.mark.asyncio
async def test_drain_preserves_submission_order() -> None:
    synthesize, finished = _synth_with_delays({"a": 0.05, "b": 0.0, "c": 0.02})
    emitted: list[bytes] = []

    async def emit(audio: bytes) -> None:
        emitted.append(audio)

    sender = OrderedAudioSender(synthesize, emit, asyncio.Event())
    drain = asyncio.create_task(sender.drain())
    for sentence in ("a", "b", "c"):
        sender.submit(sentence)
    sender.close()

    assert await drain == 3
    assert finished == ["b", "c", "a"]
    assert emitted == [b"a", b"b", b"c"]
    assert sender.emitted == 3


@pytest.mark.asyncio
async def test_drain_waits_for_late_submissions() -> None:
    synthesize, _ = _synth_with_delays({})
    emitted: list[bytes] = []

    async def emit(audio: bytes) -> None:
        emitted.append(audio)

    sender = OrderedAudioSender(synthesize, emit, asyncio.Event())
    drain = asyncio.create_task(sender.drain())
    await asyncio.sleep(0.01)
    assert not drain.done()

    sender.submit("late")
    await asyncio.sleep(0.01)
    assert emitted == [b"late"]

    sender.close()
    assert await asyncio.wait_for(drain, timeout=1.0) == 1


@pytest.mark.asyncio
async def test_interrupt_stops_emission_and_discards_results() -> None:
    synthesize, finished = _synth_with_delays({"first": 0.0, "second": 0.05})
    emitted: list[bytes] = []
    interrupted = asyncio.Event()

    async def emit(audio: bytes) -> None:
        emitted.append(audio)

    sender = OrderedAudioSender(synthesize, emit, interrupted)
    drain = asyncio.create_task(sender.drain())
    sender.submit("first")
    sender.submit("second")
    await asyncio.sleep(0.01)

    interrupted.set()
    assert await asyncio.wait_for(drain, timeout=1.0) == 1
    sender.discard_outstanding()

    # The outstanding synthesis still completes but is never emitted.
    await asyncio.sleep(0.08)
    assert finished == ["first", "second"]
    assert emitted == [b"first"]


@pytest.mark.asyncio
async def test_submit_after_close_is_rejected() -> None:
    synthesize, _ = _synth_with_delays({})

    async def emit(audio: bytes) -> None:
        return None

    sender = OrderedAudioSender(synthesize, emit, asyncio.Event())
    sender.close()
    with pytest.raises(RuntimeError):
        sender.submit("too late")


@pytest.mark.asyncio
async def test_cancel_outstanding_stops_pending_synthesis() -> None:
    synthesize, finished = _synth_with_delays({"slow": 10.0})

    async def emit(audio: bytes) -> None:
        return None

    sender = OrderedAudioSender(synthesize, emit, asyncio.Event())
    sender.submit("slow")
    await asyncio.wait_for(sender.cancel_outstanding(), timeout=1.0)
    assert finished == []
