"""Ingress adapter configuration (env names and defaults)."""

from __future__ import annotations

ENV_CLIENT_PORT = "CLIENT_PORT"
ENV_CLIENT_HOST = "CLIENT_HOST"
ENV_CLIENT_ID = "CLIENT_ID"
ENV_REQUEST_TIMEOUT_S = "REQUEST_TIMEOUT_S"
ENV_MAX_BODY_BYTES = "MAX_BODY_BYTES"

DEFAULT_CLIENT_PORT = 9983
DEFAULT_CLIENT_HOST = "0.0.0.0"  # noqa: S104
DEFAULT_REQUEST_TIMEOUT_S = 30.0
DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024

CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"]

# Framing headers are recomputed for the outbound HTTP response.
RESPONSE_FRAMING_HEADERS = frozenset(
    {
        "content-length",
        "transfer-encoding",
        "content-encoding",
        "connection",
        "keep-alive",
    }
)

# Statuses the adapter produces itself
HTTP_STATUS_TARGET_ERROR = 500
HTTP_STATUS_UNAVAILABLE = 503
HTTP_STATUS_TIMEOUT = 504
HTTP_STATUS_TOO_LARGE = 413

MESSAGE_NOT_CONNECTED = "Service unavailable - not connected to relay server"
MESSAGE_TIMEOUT = "Request timeout"
MESSAGE_TOO_LARGE = "Request body too large"

__all__ = [
    "ENV_CLIENT_PORT",
    "ENV_CLIENT_HOST",
    "ENV_CLIENT_ID",
    "ENV_REQUEST_TIMEOUT_S",
    "ENV_MAX_BODY_BYTES",
    "DEFAULT_CLIENT_PORT",
    "DEFAULT_CLIENT_HOST",
    "DEFAULT_REQUEST_TIMEOUT_S",
    "DEFAULT_MAX_BODY_BYTES",
    "CORS_ALLOW_METHODS",
    "CORS_ALLOW_HEADERS",
    "RESPONSE_FRAMING_HEADERS",
    "HTTP_STATUS_TARGET_ERROR",
    "HTTP_STATUS_UNAVAILABLE",
    "HTTP_STATUS_TIMEOUT",
    "HTTP_STATUS_TOO_LARGE",
    "MESSAGE_NOT_CONNECTED",
    "MESSAGE_TIMEOUT",
    "MESSAGE_TOO_LARGE",
]
