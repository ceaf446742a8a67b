"""Plain HTTP request/response values exchanged with the ingress adapter (dataclasses only)."""

from __future__ import annotations

from dataclasses import field, dataclass

from tunnel.protocol.envelope import Query, Headers


@dataclass(frozen=True, slots=True)
class HttpRequest:
    method: str
    path: str
    headers: Headers = field(default_factory=dict)
    query: Query | None = None
    body: bytes = b""


@dataclass(frozen=True, slots=True)
class HttpResponse:
    status_code: int
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""


__all__ = ["HttpRequest", "HttpResponse"]
