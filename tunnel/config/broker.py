"""Relay broker configuration (env names and defaults)."""

from __future__ import annotations

ENV_BROKER_PORT = "PORT"
ENV_BROKER_HOST = "BROKER_HOST"

DEFAULT_BROKER_PORT = 8080
DEFAULT_BROKER_HOST = "0.0.0.0"  # noqa: S104

WS_ENDPOINT_PATH = "/"

# Close codes
WS_CLOSE_NOT_REGISTERED_CODE = 4003
WS_CLOSE_NOT_REGISTERED_REASON = "first message must be a register envelope"

__all__ = [
    "ENV_BROKER_PORT",
    "ENV_BROKER_HOST",
    "DEFAULT_BROKER_PORT",
    "DEFAULT_BROKER_HOST",
    "WS_ENDPOINT_PATH",
    "WS_CLOSE_NOT_REGISTERED_CODE",
    "WS_CLOSE_NOT_REGISTERED_REASON",
]
