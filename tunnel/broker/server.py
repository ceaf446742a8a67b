"""FastAPI server for the relay broker."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from tunnel.state.settings import BrokerSettings
from tunnel.config.broker import WS_ENDPOINT_PATH
from tunnel.runtime.dependencies import build_broker_deps

from .manager import handle_websocket_connection

logger = logging.getLogger(__name__)


def create_broker_app(settings: BrokerSettings | None = None) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        runtime_deps = build_broker_deps(settings)
        app.state.runtime_deps = runtime_deps
        logger.info("broker: ready on port %s", runtime_deps.settings.port)
        try:
            yield
        finally:
            await runtime_deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    @app.get("/health")
    async def health() -> dict:
        runtime_deps = getattr(app.state, "runtime_deps", None)
        if runtime_deps is None:
            return {"status": "starting"}
        return {"status": "ok", **runtime_deps.router.snapshot()}

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


__all__ = ["create_broker_app"]
