"""Wire message parsing/validation for broker envelopes."""

from __future__ import annotations

from typing import Any

import orjson

from tunnel.errors import EnvelopeError
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
    BODY_ENCODING_BASE64,
    ERROR_INVALID_MESSAGE,
)

from .envelope import (
    Role,
    Envelope,
    MultiValue,
    ErrorMessage,
    RequestMessage,
    RegisterMessage,
    ResponseMessage,
    RegisteredMessage,
)


def _invalid(reason: str) -> EnvelopeError:
    return EnvelopeError(ERROR_INVALID_MESSAGE, reason)


def _optional_str(msg: dict[str, Any], key: str) -> str | None:
    value = msg.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise _invalid(f"'{key}' must be a string")
    value = value.strip()
    return value or None


def _required_str(msg: dict[str, Any], key: str) -> str:
    value = _optional_str(msg, key)
    if value is None:
        raise _invalid(f"message missing non-empty '{key}'")
    return value


def _scalar_str(value: Any, key: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise _invalid(f"'{key}' values must be strings or lists of strings")


def _multi_dict(msg: dict[str, Any], key: str) -> dict[str, MultiValue] | None:
    value = msg.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise _invalid(f"'{key}' must be an object")
    out: dict[str, MultiValue] = {}
    for name, item in value.items():
        if isinstance(item, list):
            out[name] = [_scalar_str(v, key) for v in item]
        else:
            out[name] = _scalar_str(item, key)
    return out


def _role(msg: dict[str, Any]) -> Role:
    raw = msg.get(KEY_ROLE)
    try:
        return Role(raw)
    except ValueError as exc:
        raise _invalid(f"unknown role {raw!r}") from exc


def _body_encoding(msg: dict[str, Any]) -> str | None:
    encoding = _optional_str(msg, KEY_BODY_ENCODING)
    if encoding is not None and encoding != BODY_ENCODING_BASE64:
        raise _invalid(f"unsupported '{KEY_BODY_ENCODING}' {encoding!r}")
    return encoding


def _parse_register(msg: dict[str, Any]) -> RegisterMessage:
    return RegisterMessage(role=_role(msg), client_id=_optional_str(msg, KEY_CLIENT_ID))


def _parse_registered(msg: dict[str, Any]) -> RegisteredMessage:
    return RegisteredMessage(role=_role(msg), client_id=_optional_str(msg, KEY_CLIENT_ID))


def _parse_request(msg: dict[str, Any]) -> RequestMessage:
    path = msg.get(KEY_PATH)
    if not isinstance(path, str) or not path:
        raise _invalid(f"message missing non-empty '{KEY_PATH}'")
    return RequestMessage(
        request_id=_optional_str(msg, KEY_REQUEST_ID),
        method=_required_str(msg, KEY_METHOD).upper(),
        path=path,
        headers=_multi_dict(msg, KEY_HEADERS) or {},
        body=msg.get(KEY_BODY),
        body_encoding=_body_encoding(msg),
        query=_multi_dict(msg, KEY_QUERY),
    )


def _parse_response(msg: dict[str, Any]) -> ResponseMessage:
    status = msg.get(KEY_STATUS_CODE)
    if not isinstance(status, int) or isinstance(status, bool) or not 100 <= status <= 599:
        raise _invalid(f"'{KEY_STATUS_CODE}' must be an HTTP status code")
    return ResponseMessage(
        request_id=_required_str(msg, KEY_REQUEST_ID),
        status_code=status,
        headers=_multi_dict(msg, KEY_HEADERS) or {},
        body=msg.get(KEY_BODY),
        body_encoding=_body_encoding(msg),
    )


def _parse_error(msg: dict[str, Any]) -> ErrorMessage:
    return ErrorMessage(
        message=_required_str(msg, KEY_ERROR),
        request_id=_optional_str(msg, KEY_REQUEST_ID),
        code=_optional_str(msg, KEY_CODE),
    )


_PARSERS = {
    TYPE_REGISTER: _parse_register,
    TYPE_REGISTERED: _parse_registered,
    TYPE_REQUEST: _parse_request,
    TYPE_RESPONSE: _parse_response,
    TYPE_ERROR: _parse_error,
}


def parse_envelope(raw: str | bytes) -> Envelope:
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise _invalid(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise _invalid("message must be a JSON object")

    msg_type = msg.get(KEY_TYPE)
    if not isinstance(msg_type, str) or not msg_type.strip():
        raise _invalid(f"message missing non-empty '{KEY_TYPE}'")

    parser = _PARSERS.get(msg_type.strip())
    if parser is None:
        raise _invalid(f"message type '{msg_type}' is not supported")
    return parser(msg)


__all__ = ["parse_envelope"]
