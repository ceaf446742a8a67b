"""FastAPI server exposing the ingress adapter as a plain HTTP proxy."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import Response, ORJSONResponse
from fastapi.middleware.cors import CORSMiddleware

from tunnel.state.http import HttpRequest
from tunnel.state.settings import IngressSettings
from tunnel.protocol.multidict import to_multi_dict
from tunnel.runtime.dependencies import build_ingress_deps
from tunnel.config.ingress import (
    MESSAGE_TOO_LARGE,
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    HTTP_STATUS_TOO_LARGE,
)

logger = logging.getLogger(__name__)

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


async def read_limited_body(request: Request, limit: int) -> bytes | None:
    """Read the request body; None when it exceeds *limit* bytes (0 disables the cap)."""
    declared = request.headers.get("content-length", "")
    if limit > 0 and declared.isdigit() and int(declared) > limit:
        return None
    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if limit > 0 and size > limit:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


def raw_request_path(request: Request) -> str:
    """The path exactly as the client sent it, percent-encoding intact."""
    raw = request.scope.get("raw_path")
    if not raw:
        return request.url.path
    return raw.split(b"?", 1)[0].decode("latin-1")


def create_ingress_app(settings: IngressSettings | None = None, *, start_link: bool = True) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        runtime_deps = build_ingress_deps(settings)
        app.state.runtime_deps = runtime_deps
        if start_link:
            runtime_deps.start()
        logger.info("ingress: ready on port %s", runtime_deps.settings.port)
        try:
            yield
        finally:
            await runtime_deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )

    @app.exception_handler(Exception)
    async def _unhandled(_request: Request, exc: Exception) -> ORJSONResponse:
        logger.error("ingress error: %s", exc, exc_info=exc)
        return ORJSONResponse({"error": "Internal server error"}, status_code=500)

    @app.api_route("/{full_path:path}", methods=PROXY_METHODS, include_in_schema=False)
    async def proxy(request: Request) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200)

        runtime_deps = getattr(app.state, "runtime_deps", None)
        if runtime_deps is None:
            raise RuntimeError("Runtime dependencies are not initialized")

        body = await read_limited_body(request, runtime_deps.settings.max_body_bytes)
        if body is None:
            return ORJSONResponse({"error": MESSAGE_TOO_LARGE}, status_code=HTTP_STATUS_TOO_LARGE)

        result = await runtime_deps.adapter.handle(
            HttpRequest(
                method=request.method,
                path=raw_request_path(request),
                headers=to_multi_dict(request.headers.items(), lower_keys=True),
                query=to_multi_dict(request.query_params.multi_items()) or None,
                body=body,
            )
        )
        response = Response(content=result.body, status_code=result.status_code)
        for key, value in result.headers:
            response.headers.append(key, value)
        return response

    return app


__all__ = ["create_ingress_app", "raw_request_path", "read_limited_body"]
