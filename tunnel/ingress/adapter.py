"""Translation of inbound HTTP requests into broker round trips."""

from __future__ import annotations

import uuid
import logging
from collections.abc import Callable

import orjson

from tunnel.errors import EnvelopeError
from tunnel.link import BrokerLink
from tunnel.protocol.multidict import iter_multi_items
from tunnel.state.http import HttpRequest, HttpResponse
from tunnel.protocol.body import decode_body, encode_body
from tunnel.config.protocol import ERROR_TARGET_UNAVAILABLE
from tunnel.protocol import Envelope, ErrorMessage, RequestMessage, ResponseMessage
from tunnel.config.ingress import (
    MESSAGE_TIMEOUT,
    HTTP_STATUS_TIMEOUT,
    MESSAGE_NOT_CONNECTED,
    HTTP_STATUS_UNAVAILABLE,
    HTTP_STATUS_TARGET_ERROR,
    RESPONSE_FRAMING_HEADERS,
)

from .pending import Outcome, TimedOut, IngressPendingTable

logger = logging.getLogger(__name__)


def json_error(status_code: int, message: str) -> HttpResponse:
    return HttpResponse(
        status_code=status_code,
        headers=[("content-type", "application/json")],
        body=orjson.dumps({"error": message}),
    )


def _header(headers: dict, name: str) -> str | None:
    for key, value in iter_multi_items(headers):
        if key.lower() == name:
            return value
    return None


class IngressAdapter:
    """HTTP request in, HTTP response out, by way of the broker.

    Nothing is queued: when the broker link is down the caller gets a 503 at
    once. A request whose reply does not arrive within the timeout gets a 504.
    """

    def __init__(
        self,
        link: BrokerLink,
        *,
        timeout_s: float,
        pending: IngressPendingTable | None = None,
        request_id_fn: Callable[[], str] | None = None,
    ) -> None:
        self._link = link
        self._timeout_s = float(timeout_s)
        self._pending = pending or IngressPendingTable()
        self._request_id_fn = request_id_fn or (lambda: str(uuid.uuid4()))

    @property
    def pending(self) -> IngressPendingTable:
        return self._pending

    async def handle(self, request: HttpRequest) -> HttpResponse:
        if not self._link.is_connected:
            logger.info("Rejecting %s %s: not connected to relay server", request.method, request.path)
            return json_error(HTTP_STATUS_UNAVAILABLE, MESSAGE_NOT_CONNECTED)

        request_id = self._request_id_fn()
        body, body_encoding = encode_body(request.body, _header(request.headers, "content-type"))
        envelope = RequestMessage(
            request_id=request_id,
            method=request.method,
            path=request.path,
            headers=request.headers,
            body=body,
            body_encoding=body_encoding,
            query=request.query or None,
        )

        entry = self._pending.open(request_id, self._timeout_s)
        if not await self._link.send(envelope):
            self._pending.discard(request_id)
            logger.info("Request %s not sent: relay connection dropped", request_id)
            return json_error(HTTP_STATUS_UNAVAILABLE, MESSAGE_NOT_CONNECTED)
        logger.info("Request %s sent: %s %s", request_id, request.method, request.path)

        outcome = await entry.wait()
        return self._to_http(outcome)

    async def on_envelope(self, envelope: Envelope) -> None:
        if isinstance(envelope, ResponseMessage):
            if not self._pending.settle(envelope.request_id, envelope):
                logger.info("No pending request found for ID: %s", envelope.request_id)
        elif isinstance(envelope, ErrorMessage):
            if envelope.request_id is None:
                logger.warning("Relay server reported an error: %s", envelope.message)
            elif not self._pending.settle(envelope.request_id, envelope):
                logger.info("No pending request found for error ID: %s", envelope.request_id)
        else:
            logger.info("Unexpected message type: %s", type(envelope).__name__)

    def _to_http(self, outcome: Outcome) -> HttpResponse:
        if isinstance(outcome, TimedOut):
            logger.info("Request %s timed out", outcome.request_id)
            return json_error(HTTP_STATUS_TIMEOUT, MESSAGE_TIMEOUT)

        if isinstance(outcome, ErrorMessage):
            logger.info("Error response %s sent to client", outcome.request_id)
            status = HTTP_STATUS_UNAVAILABLE if outcome.code == ERROR_TARGET_UNAVAILABLE else HTTP_STATUS_TARGET_ERROR
            return json_error(status, outcome.message)

        try:
            body = decode_body(outcome.body, outcome.body_encoding)
        except EnvelopeError as exc:
            logger.warning("Response %s carried an unusable body: %s", outcome.request_id, exc)
            return json_error(HTTP_STATUS_TARGET_ERROR, str(exc))

        headers = [
            (key, value)
            for key, value in iter_multi_items(outcome.headers)
            if key.lower() not in RESPONSE_FRAMING_HEADERS
        ]
        logger.info("Response %s sent to client", outcome.request_id)
        return HttpResponse(status_code=outcome.status_code, headers=headers, body=body)


__all__ = ["IngressAdapter", "json_error"]
