from __future__ import annotations

import base64

import pytest

from coach_voice.pipeline.audio import encode_audio, decode_audio_data_url


def test_decode_data_url_keeps_mime_type() -> None:
    payload = base64.b64encode(b"webm-bytes").decode()
    audio, mime = decode_audio_data_url(f"data:audio/webm;codecs=opus;base64,{payload}")
    assert audio == b"webm-bytes"
    assert mime == "audio/webm"


def test_decode_bare_base64_uses_default_mime() -> None:
    audio, mime = decode_audio_data_url(encode_audio(b"\x00\x01\x02"))
    assert audio == b"\x00\x01\x02"
    assert mime == "audio/webm"


@pytest.mark.parametrize(
    "value",
    [
        "",
        "   ",
        "data:audio/webm;base64",
        "data:audio/webm,plain-text",
        "data:audio/webm;base64,@@not-base64@@",
    ],
)
def test_decode_rejects_invalid_payloads(value: str) -> None:
    with pytest.raises(ValueError):
        decode_audio_data_url(value)
