"""Per-connection receive loop for the relay broker."""

from __future__ import annotations

import logging

from fastapi import WebSocket, WebSocketDisconnect

from tunnel.errors import EnvelopeError, RegistrationError
from tunnel.protocol import ErrorMessage, RegisterMessage, parse_envelope

from .router import RelayRouter
from .connection import BrokerConnection

logger = logging.getLogger(__name__)


async def receive_payload(ws: WebSocket) -> str | bytes:
    """Return the next text or binary frame; raise WebSocketDisconnect on close."""
    message = await ws.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(code=message.get("code", 1000), reason=message.get("reason"))
    text = message.get("text")
    if text is not None:
        return text
    return message.get("bytes") or b""


async def read_registration(ws: WebSocket) -> RegisterMessage:
    raw = await receive_payload(ws)
    try:
        envelope = parse_envelope(raw)
    except EnvelopeError as exc:
        raise RegistrationError(f"invalid register message: {exc}") from exc
    if not isinstance(envelope, RegisterMessage):
        raise RegistrationError(f"first message must be a register envelope, got {type(envelope).__name__}")
    return envelope


async def run_message_loop(ws: WebSocket, conn: BrokerConnection, router: RelayRouter) -> None:
    try:
        while True:
            raw = await receive_payload(ws)
            try:
                envelope = parse_envelope(raw)
            except EnvelopeError as exc:
                logger.info("Invalid message from %r: %s", conn, exc)
                await conn.send(ErrorMessage(message=str(exc), code=exc.code))
                continue
            await router.handle(conn, envelope)
    except WebSocketDisconnect:
        return


__all__ = ["read_registration", "receive_payload", "run_message_loop"]
