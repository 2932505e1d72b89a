"""HTTP voice routes: status, push-to-talk transcription, one-shot speech."""

from __future__ import annotations

import logging

from pydantic import BaseModel
from fastapi import Depends, Request, APIRouter, HTTPException
from fastapi.responses import Response

from coach_voice.state.runtime import RuntimeDeps
from coach_voice.handlers.websocket.auth import authenticate
from coach_voice.config.providers import DEFAULT_AUDIO_MIME_TYPE
from coach_voice.errors import CollaboratorError, VoiceUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/voice", tags=["voice"])

_VOICE_DISABLED_DETAIL = "Voice features are not configured on this server."


class SpeakRequest(BaseModel):
    text: str


def get_runtime_deps(request: Request) -> RuntimeDeps:
    runtime_deps = getattr(request.app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def require_owner(request: Request, runtime_deps: RuntimeDeps = Depends(get_runtime_deps)) -> str:
    owner_id = authenticate(request, runtime_deps.settings.auth.jwt_secret)
    if owner_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return owner_id


def _require_voice(runtime_deps: RuntimeDeps) -> None:
    if not runtime_deps.voice_enabled:
        raise HTTPException(status_code=503, detail=_VOICE_DISABLED_DETAIL)


@router.get("/status")
async def voice_status(
    _owner_id: str = Depends(require_owner),
    runtime_deps: RuntimeDeps = Depends(get_runtime_deps),
) -> dict[str, bool]:
    return {"enabled": runtime_deps.voice_enabled}


@router.post("/transcribe")
async def transcribe(
    request: Request,
    owner_id: str = Depends(require_owner),
    runtime_deps: RuntimeDeps = Depends(get_runtime_deps),
) -> dict[str, str]:
    _require_voice(runtime_deps)
    audio = await request.body()
    if len(audio) < runtime_deps.settings.limits.min_utterance_bytes:
        raise HTTPException(status_code=400, detail="No audio data received")

    content_type = (request.headers.get("content-type") or "").split(";")[0].strip()
    mime_type = content_type if content_type.startswith("audio/") else DEFAULT_AUDIO_MIME_TYPE
    try:
        transcript = await runtime_deps.transcriber.transcribe(audio, mime_type=mime_type)
    except VoiceUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except CollaboratorError as exc:
        logger.exception("push-to-talk transcription failed owner=%s", owner_id)
        raise HTTPException(status_code=502, detail="Transcription failed") from exc
    return {"transcript": transcript}


@router.post("/speak")
async def speak(
    body: SpeakRequest,
    owner_id: str = Depends(require_owner),
    runtime_deps: RuntimeDeps = Depends(get_runtime_deps),
) -> Response:
    _require_voice(runtime_deps)
    text = body.text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="text is required")
    try:
        audio = await runtime_deps.synthesizer.synthesize(text)
    except VoiceUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except CollaboratorError as exc:
        logger.exception("speech synthesis failed owner=%s", owner_id)
        raise HTTPException(status_code=502, detail="Speech synthesis failed") from exc
    return Response(content=audio, media_type="audio/mpeg")


__all__ = ["router"]
