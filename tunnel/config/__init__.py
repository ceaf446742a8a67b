"""Configuration module exports (env names and defaults only)."""

from .broker import WS_ENDPOINT_PATH
from .link import DEFAULT_RECONNECT_DELAY_S
from .ingress import DEFAULT_REQUEST_TIMEOUT_S

__all__ = [
    "DEFAULT_RECONNECT_DELAY_S",
    "DEFAULT_REQUEST_TIMEOUT_S",
    "WS_ENDPOINT_PATH",
]
