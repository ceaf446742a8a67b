"""Egress executor configuration (env names and defaults)."""

from __future__ import annotations

ENV_TARGET_API_URL = "TARGET_API_URL"
ENV_TARGET_TIMEOUT_S = "TARGET_TIMEOUT_S"

DEFAULT_TARGET_API_URL = "http://localhost:8000"
DEFAULT_TARGET_TIMEOUT_S = 30.0

# Hop/transport headers that are meaningless or wrong in the re-issued request.
STRIPPED_REQUEST_HEADERS = frozenset(
    {
        "host",
        "content-length",
        "connection",
        "proxy-connection",
        "keep-alive",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
        "sec-websocket-key",
        "sec-websocket-version",
        "sec-websocket-extensions",
        "sec-websocket-protocol",
        "sec-websocket-accept",
    }
)

JSON_CONTENT_TYPE_MARKER = "application/json"

__all__ = [
    "ENV_TARGET_API_URL",
    "ENV_TARGET_TIMEOUT_S",
    "DEFAULT_TARGET_API_URL",
    "DEFAULT_TARGET_TIMEOUT_S",
    "STRIPPED_REQUEST_HEADERS",
    "JSON_CONTENT_TYPE_MARKER",
]
