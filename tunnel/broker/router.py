"""Routing of envelopes between ingress connections and the egress connection."""

from __future__ import annotations

import time
import uuid
import asyncio
import logging
import itertools
from typing import Any
from collections.abc import Callable

from tunnel.config.protocol import (
    ERROR_TARGET_UNAVAILABLE,
    REQUEST_ID_PREFIX,
    INGRESS_ID_PREFIX,
    ERROR_FORBIDDEN_MESSAGE,
    ERROR_ALREADY_REGISTERED,
    MESSAGE_TARGET_UNAVAILABLE,
    ERROR_DUPLICATE_REQUEST_ID,
)
from tunnel.protocol import (
    Role,
    Envelope,
    ErrorMessage,
    RequestMessage,
    RegisterMessage,
    ResponseMessage,
    RegisteredMessage,
)

from .pending import PendingRequestTable
from .registry import ConnectionRegistry
from .connection import BrokerConnection

logger = logging.getLogger(__name__)


class RelayRouter:
    """Owns the broker state: the connection registry and the pending request table.

    Every mutation of that state happens under one lock. Sends happen outside
    it; each connection serializes its own sends.
    """

    def __init__(
        self,
        *,
        registry: ConnectionRegistry | None = None,
        pending: PendingRequestTable | None = None,
        request_id_fn: Callable[[], str] | None = None,
    ) -> None:
        self._registry = registry or ConnectionRegistry()
        self._pending = pending or PendingRequestTable()
        self._lock = asyncio.Lock()
        self._counter = itertools.count(1)
        self._request_id_fn = request_id_fn or self._next_request_id

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    @property
    def pending(self) -> PendingRequestTable:
        return self._pending

    def _next_request_id(self) -> str:
        return f"{REQUEST_ID_PREFIX}{next(self._counter)}_{int(time.time() * 1000)}"

    async def register(self, ws: Any, message: RegisterMessage) -> BrokerConnection:
        async with self._lock:
            if message.role is Role.EGRESS:
                conn = BrokerConnection(ws, connection_id=f"master_{uuid.uuid4().hex[:12]}", role=Role.EGRESS)
                prior = self._registry.set_egress(conn)
                if prior is not None:
                    logger.warning("Master computer re-registered; previous connection %r is now stale", prior)
                logger.info("Master computer registered")
            else:
                client_id = message.client_id or f"{INGRESS_ID_PREFIX}{uuid.uuid4()}"
                conn = BrokerConnection(ws, connection_id=client_id, role=Role.INGRESS)
                prior = self._registry.add_ingress(conn)
                if prior is not None:
                    logger.warning("Client ID %s re-registered by a new connection", client_id)
                logger.info("Client registered with ID: %s", client_id)

        client_id = conn.connection_id if conn.role is Role.INGRESS else None
        await conn.send(RegisteredMessage(role=conn.role, client_id=client_id))
        return conn

    async def handle(self, conn: BrokerConnection, envelope: Envelope) -> None:
        if isinstance(envelope, RequestMessage):
            await self._handle_request(conn, envelope)
        elif isinstance(envelope, (ResponseMessage, ErrorMessage)):
            await self._handle_reply(conn, envelope)
        elif isinstance(envelope, RegisterMessage):
            await conn.send(
                ErrorMessage(
                    message=f"connection already registered as {conn.role.value}",
                    code=ERROR_ALREADY_REGISTERED,
                )
            )
        else:
            logger.info("Dropping unexpected %s from %r", type(envelope).__name__, conn)

    async def _handle_request(self, conn: BrokerConnection, message: RequestMessage) -> None:
        if conn.role is not Role.INGRESS:
            await conn.send(
                ErrorMessage(
                    message="requests are only accepted from client connections",
                    request_id=message.request_id,
                    code=ERROR_FORBIDDEN_MESSAGE,
                )
            )
            return

        async with self._lock:
            egress = self._registry.egress
            request_id = message.request_id
            recorded = False
            if egress is not None:
                request_id = request_id or self._request_id_fn()
                recorded = self._pending.add(request_id, conn) is not None

        if egress is None:
            logger.info("Request %s rejected: master computer not available", message.request_id)
            await conn.send(
                ErrorMessage(
                    message=MESSAGE_TARGET_UNAVAILABLE,
                    request_id=message.request_id,
                    code=ERROR_TARGET_UNAVAILABLE,
                )
            )
            return

        if not recorded:
            logger.warning("Request %s rejected: id is already pending", request_id)
            await conn.send(
                ErrorMessage(
                    message=f"request id {request_id} is already pending",
                    request_id=request_id,
                    code=ERROR_DUPLICATE_REQUEST_ID,
                )
            )
            return

        if await egress.send(message.with_request_id(request_id)):
            logger.info("Request %s forwarded to master", request_id)
            return

        # The egress went away between lookup and send; nothing was forwarded.
        async with self._lock:
            self._pending.pop(request_id)
        logger.warning("Request %s could not be forwarded; master connection is closing", request_id)
        await conn.send(
            ErrorMessage(
                message=MESSAGE_TARGET_UNAVAILABLE,
                request_id=request_id,
                code=ERROR_TARGET_UNAVAILABLE,
            )
        )

    async def _handle_reply(self, conn: BrokerConnection, message: ResponseMessage | ErrorMessage) -> None:
        kind = "Response" if isinstance(message, ResponseMessage) else "Error"
        async with self._lock:
            current = self._registry.is_current_egress(conn)
            route = self._pending.pop(message.request_id) if current and message.request_id else None

        if not current:
            logger.info("%s %s received from non-master connection %r; dropped", kind, message.request_id, conn)
            return
        if message.request_id is None:
            logger.warning("Master reported an error without a request id: %s", getattr(message, "message", ""))
            return
        if route is None:
            logger.info("No pending request found for ID: %s", message.request_id)
            return

        if await route.owner.send(message):
            logger.info("%s %s sent to client", kind, message.request_id)
        else:
            logger.info("%s %s could not be delivered; client %s is gone", kind, message.request_id, route.owner.connection_id)

    async def disconnect(self, conn: BrokerConnection) -> None:
        async with self._lock:
            removed = self._registry.remove(conn)
            purged = self._pending.purge_owner(conn) if conn.role is Role.INGRESS else []

        if conn.role is Role.EGRESS:
            if removed:
                logger.info("Master computer disconnected")
            else:
                logger.info("Stale master connection %s closed", conn.connection_id)
        else:
            logger.info("Client %s disconnected", conn.connection_id)
        for request_id in purged:
            logger.info("Cleaned up pending request %s", request_id)

    def snapshot(self) -> dict[str, Any]:
        return {
            "egress": self._registry.has_egress(),
            "ingress": self._registry.ingress_count(),
            "pending": len(self._pending),
        }


__all__ = ["RelayRouter"]
