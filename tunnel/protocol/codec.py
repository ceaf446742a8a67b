"""Serialization of envelopes to their JSON wire form."""

from __future__ import annotations

from typing import Any

import orjson

from tunnel.config.protocol import (
    KEY_BODY,
    KEY_CODE,
    KEY_PATH,
    KEY_ROLE,
    KEY_TYPE,
    KEY_ERROR,
    KEY_QUERY,
    KEY_METHOD,
    KEY_HEADERS,
    KEY_CLIENT_ID,
    TYPE_REQUEST,
    TYPE_ERROR,
    KEY_REQUEST_ID,
    TYPE_REGISTER,
    TYPE_RESPONSE,
    KEY_STATUS_CODE,
    TYPE_REGISTERED,
    KEY_BODY_ENCODING,
)

from .envelope import (
    Envelope,
    ErrorMessage,
    RequestMessage,
    RegisterMessage,
    ResponseMessage,
    RegisteredMessage,
)


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


def envelope_to_dict(envelope: Envelope) -> dict[str, Any]:
    if isinstance(envelope, RegisterMessage):
        data = {KEY_TYPE: TYPE_REGISTER, KEY_ROLE: envelope.role.value, KEY_CLIENT_ID: envelope.client_id}
    elif isinstance(envelope, RegisteredMessage):
        data = {KEY_TYPE: TYPE_REGISTERED, KEY_ROLE: envelope.role.value, KEY_CLIENT_ID: envelope.client_id}
    elif isinstance(envelope, RequestMessage):
        data = {
            KEY_TYPE: TYPE_REQUEST,
            KEY_REQUEST_ID: envelope.request_id,
            KEY_METHOD: envelope.method,
            KEY_PATH: envelope.path,
            KEY_HEADERS: envelope.headers,
            KEY_BODY: envelope.body,
            KEY_BODY_ENCODING: envelope.body_encoding,
            KEY_QUERY: envelope.query,
        }
    elif isinstance(envelope, ResponseMessage):
        data = {
            KEY_TYPE: TYPE_RESPONSE,
            KEY_REQUEST_ID: envelope.request_id,
            KEY_STATUS_CODE: envelope.status_code,
            KEY_HEADERS: envelope.headers,
            KEY_BODY: envelope.body,
            KEY_BODY_ENCODING: envelope.body_encoding,
        }
    elif isinstance(envelope, ErrorMessage):
        data = {
            KEY_TYPE: TYPE_ERROR,
            KEY_REQUEST_ID: envelope.request_id,
            KEY_ERROR: envelope.message,
            KEY_CODE: envelope.code,
        }
    else:
        raise TypeError(f"not an envelope: {type(envelope).__name__}")
    return _drop_none(data)


def dump_envelope(envelope: Envelope) -> str:
    return orjson.dumps(envelope_to_dict(envelope)).decode("utf-8")


__all__ = ["dump_envelope", "envelope_to_dict"]
