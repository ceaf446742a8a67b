"""Broker-side table of requests forwarded to egress and not yet answered."""

from __future__ import annotations

from dataclasses import dataclass

from .connection import BrokerConnection


@dataclass(slots=True)
class PendingRoute:
    request_id: str
    owner: BrokerConnection


class PendingRequestTable:
    """Map of correlation id to the ingress connection waiting for it.

    Entries never expire here; they leave on delivery or when their owner
    disconnects.
    """

    def __init__(self) -> None:
        self._routes: dict[str, PendingRoute] = {}
        self._by_owner: dict[BrokerConnection, set[str]] = {}

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._routes

    def __len__(self) -> int:
        return len(self._routes)

    def add(self, request_id: str, owner: BrokerConnection) -> PendingRoute | None:
        """Record a route; returns None when *request_id* is already pending."""
        if request_id in self._routes:
            return None
        route = PendingRoute(request_id=request_id, owner=owner)
        self._routes[request_id] = route
        self._by_owner.setdefault(owner, set()).add(request_id)
        return route

    def pop(self, request_id: str) -> PendingRoute | None:
        route = self._routes.pop(request_id, None)
        if route is None:
            return None
        owned = self._by_owner.get(route.owner)
        if owned is not None:
            owned.discard(request_id)
            if not owned:
                del self._by_owner[route.owner]
        return route

    def purge_owner(self, owner: BrokerConnection) -> list[str]:
        request_ids = sorted(self._by_owner.pop(owner, ()))
        for request_id in request_ids:
            self._routes.pop(request_id, None)
        return request_ids

    def owned_by(self, owner: BrokerConnection) -> frozenset[str]:
        return frozenset(self._by_owner.get(owner, ()))


__all__ = ["PendingRequestTable", "PendingRoute"]
