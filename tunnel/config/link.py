"""Broker link configuration shared by the ingress and egress processes."""

from __future__ import annotations

ENV_RELAY_SERVER_URL = "RELAY_SERVER_URL"
ENV_RECONNECT_DELAY_S = "RECONNECT_DELAY_S"
ENV_WS_PING_INTERVAL_S = "WS_PING_INTERVAL_S"
ENV_WS_PING_TIMEOUT_S = "WS_PING_TIMEOUT_S"
ENV_WS_MAX_MESSAGE_BYTES = "WS_MAX_MESSAGE_BYTES"

DEFAULT_RELAY_SERVER_URL = "ws://localhost:8080/"

# Fixed delay between reconnect attempts. There is no growth and no cap.
DEFAULT_RECONNECT_DELAY_S = 5.0

DEFAULT_WS_PING_INTERVAL_S = 20.0
DEFAULT_WS_PING_TIMEOUT_S = 20.0

# Must fit a 10MB body after JSON/base64 expansion.
DEFAULT_WS_MAX_MESSAGE_BYTES = 16 * 1024 * 1024

__all__ = [
    "ENV_RELAY_SERVER_URL",
    "ENV_RECONNECT_DELAY_S",
    "ENV_WS_PING_INTERVAL_S",
    "ENV_WS_PING_TIMEOUT_S",
    "ENV_WS_MAX_MESSAGE_BYTES",
    "DEFAULT_RELAY_SERVER_URL",
    "DEFAULT_RECONNECT_DELAY_S",
    "DEFAULT_WS_PING_INTERVAL_S",
    "DEFAULT_WS_PING_TIMEOUT_S",
    "DEFAULT_WS_MAX_MESSAGE_BYTES",
]
