"""Outbound WebSocket link from an ingress or egress process to the relay broker."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable, Awaitable

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from tunnel.errors import EnvelopeError
from tunnel.state.settings import LinkSettings
from tunnel.protocol import (
    Envelope,
    RegisterMessage,
    RegisteredMessage,
    dump_envelope,
    parse_envelope,
)

logger = logging.getLogger(__name__)

EnvelopeHandler = Callable[[Envelope], Awaitable[None]]


class BrokerLink:
    """Keeps one connection to the broker open, forever.

    On every open the link registers with its role. When the connection closes
    or cannot be opened, the link waits a fixed delay and tries again; the delay
    never grows and there is no retry limit.
    """

    def __init__(
        self,
        settings: LinkSettings,
        *,
        register: RegisterMessage,
        on_envelope: EnvelopeHandler | None = None,
        connect_fn: Callable[..., Any] | None = None,
    ) -> None:
        self._settings = settings
        self._register = register
        self._on_envelope = on_envelope
        self._connect = connect_fn or websockets.connect
        self._ws: Any = None
        self._connected = False
        self._stop_event = asyncio.Event()
        self._send_lock = asyncio.Lock()
        self.connect_attempts = 0

    @property
    def is_connected(self) -> bool:
        return self._connected

    def set_handler(self, on_envelope: EnvelopeHandler) -> None:
        self._on_envelope = on_envelope

    def _ws_options(self) -> dict[str, Any]:
        return {
            "ping_interval": self._settings.ping_interval_s,
            "ping_timeout": self._settings.ping_timeout_s,
            "max_size": self._settings.max_message_bytes,
        }

    async def send(self, envelope: Envelope) -> bool:
        ws = self._ws
        if ws is None or not self._connected:
            return False
        text = dump_envelope(envelope)
        async with self._send_lock:
            try:
                await ws.send(text)
            except ConnectionClosed:
                logger.debug("relay send failed; connection closed", exc_info=True)
                return False
        return True

    async def run(self) -> None:
        while not self._stop_event.is_set():
            await self._run_once()
            if self._stop_event.is_set():
                break
            delay = self._settings.reconnect_delay_s
            logger.info("Attempting to reconnect in %.1fs...", delay)
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._stop_event.wait(), timeout=delay)

    async def _run_once(self) -> None:
        self.connect_attempts += 1
        logger.info("Connecting to relay server at %s...", self._settings.relay_url)
        try:
            async with self._connect(self._settings.relay_url, **self._ws_options()) as ws:
                self._ws = ws
                self._connected = True
                logger.info("Connected to relay server")
                await self.send(self._register)
                async for raw in ws:
                    await self._dispatch(raw)
        except (OSError, WebSocketException) as exc:
            logger.warning("Relay connection error: %s", exc)
        finally:
            self._ws = None
            self._connected = False
        logger.info("Disconnected from relay server")

    async def _dispatch(self, raw: str | bytes) -> None:
        try:
            envelope = parse_envelope(raw)
        except EnvelopeError as exc:
            logger.warning("Error parsing relay message: %s", exc)
            return

        if isinstance(envelope, RegisteredMessage):
            logger.info("Registered as %s with ID: %s", envelope.role.value, envelope.client_id)
            return
        if self._on_envelope is None:
            logger.info("No handler for %s; dropped", type(envelope).__name__)
            return
        try:
            await self._on_envelope(envelope)
        except Exception:
            logger.exception("relay message handler failed")

    async def close(self) -> None:
        self._stop_event.set()
        ws = self._ws
        if ws is not None:
            with contextlib.suppress(Exception):
                await ws.close()


__all__ = ["BrokerLink", "EnvelopeHandler"]
