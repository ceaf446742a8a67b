"""Envelope wire protocol constants."""

from __future__ import annotations

# Envelope keys
KEY_TYPE = "type"
KEY_ROLE = "role"
KEY_CLIENT_ID = "clientId"
KEY_REQUEST_ID = "requestId"
KEY_METHOD = "method"
KEY_PATH = "path"
KEY_HEADERS = "headers"
KEY_BODY = "body"
KEY_BODY_ENCODING = "bodyEncoding"
KEY_QUERY = "query"
KEY_STATUS_CODE = "statusCode"
KEY_ERROR = "error"
KEY_CODE = "code"

# Message types
TYPE_REGISTER = "register"
TYPE_REGISTERED = "registered"
TYPE_REQUEST = "request"
TYPE_RESPONSE = "response"
TYPE_ERROR = "error"

# Roles as they appear on the wire
ROLE_EGRESS = "master"
ROLE_INGRESS = "client"

BODY_ENCODING_BASE64 = "base64"

# Errors (error envelope `code` values)
ERROR_INVALID_MESSAGE = "invalid_message"
ERROR_NOT_REGISTERED = "not_registered"
ERROR_ALREADY_REGISTERED = "already_registered"
ERROR_TARGET_UNAVAILABLE = "target_unavailable"
ERROR_TARGET_FAILURE = "target_failure"
ERROR_DUPLICATE_REQUEST_ID = "duplicate_request_id"
ERROR_FORBIDDEN_MESSAGE = "forbidden_message"

MESSAGE_TARGET_UNAVAILABLE = "Master computer not available"
MESSAGE_TARGET_TIMEOUT = "Request timeout"

INGRESS_ID_PREFIX = "client_"
REQUEST_ID_PREFIX = "req_"

__all__ = [
    "KEY_TYPE",
    "KEY_ROLE",
    "KEY_CLIENT_ID",
    "KEY_REQUEST_ID",
    "KEY_METHOD",
    "KEY_PATH",
    "KEY_HEADERS",
    "KEY_BODY",
    "KEY_BODY_ENCODING",
    "KEY_QUERY",
    "KEY_STATUS_CODE",
    "KEY_ERROR",
    "KEY_CODE",
    "TYPE_REGISTER",
    "TYPE_REGISTERED",
    "TYPE_REQUEST",
    "TYPE_RESPONSE",
    "TYPE_ERROR",
    "ROLE_EGRESS",
    "ROLE_INGRESS",
    "BODY_ENCODING_BASE64",
    "ERROR_INVALID_MESSAGE",
    "ERROR_NOT_REGISTERED",
    "ERROR_ALREADY_REGISTERED",
    "ERROR_TARGET_UNAVAILABLE",
    "ERROR_TARGET_FAILURE",
    "ERROR_DUPLICATE_REQUEST_ID",
    "ERROR_FORBIDDEN_MESSAGE",
    "MESSAGE_TARGET_UNAVAILABLE",
    "MESSAGE_TARGET_TIMEOUT",
    "INGRESS_ID_PREFIX",
    "REQUEST_ID_PREFIX",
]
