"""Decoding of base64 data-URL audio payloads."""

from __future__ import annotations

import base64
import binascii

from coach_voice.config.providers import DEFAULT_AUDIO_MIME_TYPE


def decode_audio_data_url(value: str) -> tuple[bytes, str]:
    """Return (audio bytes, mime type) for `data:<mime>;base64,<data>` or bare base64.

    Raises ValueError on anything that is not valid base64.
    """
    value = (value or "").strip()
    if not value:
        raise ValueError("audioData is empty")

    mime_type = DEFAULT_AUDIO_MIME_TYPE
    data = value
    if value.startswith("data:"):
        header, sep, data = value.partition(",")
        if not sep:
            raise ValueError("audioData data URL has no payload")
        meta = header[len("data:") :].split(";")
        if meta and meta[0]:
            mime_type = meta[0]
        if "base64" not in meta[1:]:
            raise ValueError("audioData data URL must be base64-encoded")

    try:
        audio = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"audioData is not valid base64: {exc}") from exc
    return audio, mime_type


def encode_audio(audio: bytes) -> str:
    return base64.b64encode(audio).decode("ascii")


__all__ = ["decode_audio_data_url", "encode_audio"]
