"""Body conversion between raw bytes and the JSON wire representation."""

from __future__ import annotations

import base64
import logging
import binascii
from typing import Any

import orjson

from tunnel.errors import EnvelopeError
from tunnel.config.egress import JSON_CONTENT_TYPE_MARKER
from tunnel.config.protocol import BODY_ENCODING_BASE64, ERROR_INVALID_MESSAGE

logger = logging.getLogger(__name__)


def is_json_content_type(content_type: str | None) -> bool:
    return JSON_CONTENT_TYPE_MARKER in (content_type or "").lower()


def encode_body(raw: bytes, content_type: str | None) -> tuple[Any, str | None]:
    """Return ``(body, body_encoding)`` for *raw*.

    JSON payloads are parsed best-effort (a parse failure is not an error), text
    payloads travel as strings and anything that is not UTF-8 is base64 encoded.
    """
    if not raw:
        return None, None

    if is_json_content_type(content_type):
        try:
            parsed = orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.debug("body declared as JSON did not parse; forwarding it raw")
        else:
            # A bare JSON string would read back as text, and null as an absent body.
            if parsed is not None and not isinstance(parsed, str):
                return parsed, None

    try:
        return raw.decode("utf-8"), None
    except UnicodeDecodeError:
        return base64.b64encode(raw).decode("ascii"), BODY_ENCODING_BASE64


def decode_body(body: Any, body_encoding: str | None) -> bytes:
    if body is None:
        return b""
    if body_encoding == BODY_ENCODING_BASE64:
        if not isinstance(body, str):
            raise EnvelopeError(ERROR_INVALID_MESSAGE, "base64 body must be a string")
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise EnvelopeError(ERROR_INVALID_MESSAGE, f"invalid base64 body: {exc}") from exc
    if isinstance(body, str):
        return body.encode("utf-8")
    return orjson.dumps(body)


__all__ = ["decode_body", "encode_body", "is_json_content_type"]
