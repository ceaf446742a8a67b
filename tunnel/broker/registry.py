"""Bookkeeping of the single egress connection and the live ingress connections."""

from __future__ import annotations

import logging

from tunnel.protocol import Role

from .connection import BrokerConnection

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Not locked on its own; the router serializes every mutation."""

    def __init__(self) -> None:
        self._egress: BrokerConnection | None = None
        self._ingress: dict[str, BrokerConnection] = {}

    @property
    def egress(self) -> BrokerConnection | None:
        return self._egress

    def has_egress(self) -> bool:
        return self._egress is not None

    def is_current_egress(self, conn: BrokerConnection) -> bool:
        return conn is self._egress and not conn.inert

    def set_egress(self, conn: BrokerConnection) -> BrokerConnection | None:
        """Install *conn* as the egress; the previous one (if any) is retired and returned."""
        if conn.role is not Role.EGRESS:
            raise ValueError(f"{conn!r} is not an egress connection")
        prior = self._egress
        if prior is not None and prior is not conn:
            prior.retire()
        self._egress = conn
        return prior if prior is not conn else None

    def add_ingress(self, conn: BrokerConnection) -> BrokerConnection | None:
        """Track *conn* under its id; returns the connection it displaced from the id, if any."""
        if conn.role is not Role.INGRESS:
            raise ValueError(f"{conn!r} is not an ingress connection")
        prior = self._ingress.get(conn.connection_id)
        self._ingress[conn.connection_id] = conn
        return prior if prior is not conn else None

    def get_ingress(self, connection_id: str) -> BrokerConnection | None:
        return self._ingress.get(connection_id)

    def remove(self, conn: BrokerConnection) -> bool:
        if conn is self._egress:
            self._egress = None
            conn.retire()
            return True
        if self._ingress.get(conn.connection_id) is conn:
            del self._ingress[conn.connection_id]
            return True
        return False

    def ingress_count(self) -> int:
        return len(self._ingress)


__all__ = ["ConnectionRegistry"]
