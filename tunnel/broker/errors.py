"""Send helpers for broker-side WebSocket connections."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocketDisconnect

from tunnel.protocol import ErrorMessage, dump_envelope

logger = logging.getLogger(__name__)


async def safe_send_text(ws: Any, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def send_error(
    ws: Any,
    *,
    message: str,
    code: str,
    request_id: str | None = None,
) -> bool:
    envelope = ErrorMessage(message=message, request_id=request_id, code=code)
    return await safe_send_text(ws, dump_envelope(envelope))


async def reject_connection(
    ws: Any,
    *,
    message: str,
    code: str,
    close_code: int,
    close_reason: str,
) -> None:
    # The socket is already accepted; tell the peer why before closing.
    await send_error(ws, message=message, code=code)
    try:
        await ws.close(code=close_code, reason=close_reason)
    except Exception:
        logger.debug("WebSocket close after rejection failed", exc_info=True)


__all__ = ["reject_connection", "safe_send_text", "send_error"]
