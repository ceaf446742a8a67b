"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LinkSettings:
    relay_url: str
    reconnect_delay_s: float
    ping_interval_s: float
    ping_timeout_s: float
    max_message_bytes: int


@dataclass(frozen=True, slots=True)
class BrokerSettings:
    host: str
    port: int


@dataclass(frozen=True, slots=True)
class IngressSettings:
    host: str
    port: int
    client_id: str
    request_timeout_s: float
    max_body_bytes: int
    link: LinkSettings


@dataclass(frozen=True, slots=True)
class EgressSettings:
    target_url: str
    target_timeout_s: float
    link: LinkSettings


__all__ = [
    "BrokerSettings",
    "EgressSettings",
    "IngressSettings",
    "LinkSettings",
]
