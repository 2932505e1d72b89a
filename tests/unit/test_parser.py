from __future__ import annotations

import json

import pytest

from coach_voice.handlers.websocket.parser import parse_client_message


def test_parse_client_message_ok() -> None:
    msg = parse_client_message(json.dumps({"type": " audio-data ", "audioData": "data:audio/webm;base64,AAAA"}))
    assert msg["type"] == "audio-data"
    assert msg["audioData"] == "data:audio/webm;base64,AAAA"


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        json.dumps([]),
        json.dumps("ping"),
        json.dumps({}),
        json.dumps({"type": ""}),
        json.dumps({"type": 7}),
    ],
)
def test_parse_client_message_invalid(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_client_message(raw)


def test_parse_client_message_enforces_size_limit() -> None:
    raw = json.dumps({"type": "audio-data", "audioData": "A" * 200})
    with pytest.raises(ValueError, match="exceeds"):
        parse_client_message(raw, max_bytes=100)
    assert parse_client_message(raw, max_bytes=0)["type"] == "audio-data"
