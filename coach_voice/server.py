"""Main FastAPI server for the voice agent."""

from __future__ import annotations

import os
import logging
from contextlib import asynccontextmanager
from collections.abc import Callable, Awaitable

import uvicorn
from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from coach_voice.state import RuntimeDeps
from coach_voice.handlers.http.voice import router as voice_router
from coach_voice.config.websocket import WS_ENDPOINT_PATH
from coach_voice.runtime.logging import configure_logging
from coach_voice.runtime.dependencies import build_runtime_deps
from coach_voice.handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)

configure_logging()

DepsFactory = Callable[[], Awaitable[RuntimeDeps]]


def create_app(build_deps: DepsFactory = build_runtime_deps) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        runtime_deps = await build_deps()
        app.state.runtime_deps = runtime_deps
        logger.info("runtime: ready (voice enabled: %s)", runtime_deps.voice_enabled)
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)
    app.include_router(voice_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.websocket(WS_ENDPOINT_PATH)
    async def websocket_endpoint(websocket: WebSocket) -> None:
        runtime_deps = getattr(app.state, "runtime_deps", None)
        if runtime_deps is None:
            raise RuntimeError("Runtime dependencies are not initialized")
        await handle_websocket_connection(websocket, runtime_deps)

    return app


app = create_app()


def main() -> None:
    uvicorn.run(
        "coach_voice.server:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_config=None,
    )


__all__ = ["app", "create_app", "main"]
