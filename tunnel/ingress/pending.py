"""Ingress-local table of HTTP requests waiting for a broker reply."""

from __future__ import annotations

import asyncio
from typing import Union
from dataclasses import dataclass

from tunnel.protocol import ErrorMessage, ResponseMessage


@dataclass(frozen=True, slots=True)
class TimedOut:
    request_id: str


Outcome = Union[ResponseMessage, ErrorMessage, TimedOut]


@dataclass(slots=True)
class PendingEntry:
    request_id: str
    future: asyncio.Future
    timer: asyncio.TimerHandle | None = None

    async def wait(self) -> Outcome:
        return await self.future


class IngressPendingTable:
    """Correlation id -> waiting result slot plus its timeout.

    Response, error and timeout race to settle an entry. Settling removes the
    entry from the table first, so only the first outcome ever reaches the
    waiting caller; later ones find nothing and are reported as unmatched.
    """

    def __init__(self) -> None:
        self._entries: dict[str, PendingEntry] = {}

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def open(self, request_id: str, timeout_s: float) -> PendingEntry:
        if request_id in self._entries:
            raise KeyError(f"request id {request_id} is already pending")
        loop = asyncio.get_running_loop()
        entry = PendingEntry(request_id=request_id, future=loop.create_future())
        entry.timer = loop.call_later(timeout_s, self.settle, request_id, TimedOut(request_id))
        self._entries[request_id] = entry
        return entry

    def settle(self, request_id: str, outcome: Outcome) -> bool:
        entry = self._entries.pop(request_id, None)
        if entry is None:
            return False
        if entry.timer is not None:
            entry.timer.cancel()
        if not entry.future.done():
            entry.future.set_result(outcome)
        return True

    def discard(self, request_id: str) -> bool:
        entry = self._entries.pop(request_id, None)
        if entry is None:
            return False
        if entry.timer is not None:
            entry.timer.cancel()
        entry.future.cancel()
        return True


__all__ = ["IngressPendingTable", "Outcome", "PendingEntry", "TimedOut"]
