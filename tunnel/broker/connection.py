"""Broker-side handle for one registered WebSocket connection."""

from __future__ import annotations

import asyncio
from typing import Any

from tunnel.protocol import Role, Envelope, dump_envelope

from .errors import safe_send_text


class BrokerConnection:
    """A connection and the role it registered with.

    Sends are serialized per connection so envelopes leave in the order they
    were handed over. A retired handle is inert: the router ignores anything it
    sends afterwards.
    """

    def __init__(self, ws: Any, *, connection_id: str, role: Role) -> None:
        self.ws = ws
        self.connection_id = connection_id
        self.role = role
        self._inert = False
        self._send_lock = asyncio.Lock()

    @property
    def inert(self) -> bool:
        return self._inert

    def retire(self) -> None:
        self._inert = True

    async def send(self, envelope: Envelope) -> bool:
        text = dump_envelope(envelope)
        async with self._send_lock:
            return await safe_send_text(self.ws, text)

    def __repr__(self) -> str:
        state = " inert" if self._inert else ""
        return f"<BrokerConnection {self.role.value}:{self.connection_id}{state}>"


__all__ = ["BrokerConnection"]
