"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import logging

from fastapi import WebSocket, WebSocketDisconnect

from tunnel.errors import RegistrationError
from tunnel.state import BrokerDeps
from tunnel.config.protocol import ERROR_NOT_REGISTERED
from tunnel.config.broker import WS_CLOSE_NOT_REGISTERED_CODE, WS_CLOSE_NOT_REGISTERED_REASON

from .errors import reject_connection
from .connection import BrokerConnection
from .message_loop import run_message_loop, read_registration

logger = logging.getLogger(__name__)


async def _register(ws: WebSocket, runtime_deps: BrokerDeps) -> BrokerConnection | None:
    try:
        message = await read_registration(ws)
    except WebSocketDisconnect:
        return None
    except RegistrationError as exc:
        logger.info("Rejecting connection: %s", exc)
        await reject_connection(
            ws,
            message=str(exc),
            code=ERROR_NOT_REGISTERED,
            close_code=WS_CLOSE_NOT_REGISTERED_CODE,
            close_reason=WS_CLOSE_NOT_REGISTERED_REASON,
        )
        return None
    return await runtime_deps.router.register(ws, message)


async def handle_websocket_connection(ws: WebSocket, runtime_deps: BrokerDeps) -> None:
    await ws.accept()
    logger.info("New connection established")

    conn: BrokerConnection | None = None
    try:
        conn = await _register(ws, runtime_deps)
        if conn is None:
            return
        await run_message_loop(ws, conn, runtime_deps.router)
    finally:
        if conn is not None:
            try:
                await runtime_deps.router.disconnect(conn)
            except Exception:
                logger.exception("broker cleanup failed for %r", conn)
            logger.info("Connection closed. Active: %s", runtime_deps.router.snapshot())


__all__ = ["handle_websocket_connection"]
