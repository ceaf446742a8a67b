"""Typed envelopes exchanged over broker connections."""

from __future__ import annotations

from enum import Enum
from typing import Any, Union
from dataclasses import field, replace, dataclass

from tunnel.config.protocol import ROLE_EGRESS, ROLE_INGRESS

MultiValue = Union[str, list[str]]
Headers = dict[str, MultiValue]
Query = dict[str, MultiValue]


class Role(str, Enum):
    EGRESS = ROLE_EGRESS
    INGRESS = ROLE_INGRESS


@dataclass(frozen=True, slots=True)
class RegisterMessage:
    role: Role
    client_id: str | None = None


@dataclass(frozen=True, slots=True)
class RegisteredMessage:
    role: Role
    client_id: str | None = None


@dataclass(frozen=True, slots=True)
class RequestMessage:
    request_id: str | None
    method: str
    path: str
    headers: Headers = field(default_factory=dict)
    body: Any = None
    body_encoding: str | None = None
    query: Query | None = None

    def with_request_id(self, request_id: str) -> RequestMessage:
        return replace(self, request_id=request_id)


@dataclass(frozen=True, slots=True)
class ResponseMessage:
    request_id: str
    status_code: int
    headers: Headers = field(default_factory=dict)
    body: Any = None
    body_encoding: str | None = None


@dataclass(frozen=True, slots=True)
class ErrorMessage:
    message: str
    request_id: str | None = None
    code: str | None = None


Envelope = Union[RegisterMessage, RegisteredMessage, RequestMessage, ResponseMessage, ErrorMessage]

__all__ = [
    "Envelope",
    "ErrorMessage",
    "Headers",
    "MultiValue",
    "Query",
    "RegisterMessage",
    "RegisteredMessage",
    "RequestMessage",
    "ResponseMessage",
    "Role",
]
