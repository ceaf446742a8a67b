"""Execution of request envelopes against the real target API."""

from __future__ import annotations

import asyncio
import logging

import httpx

from tunnel.errors import EnvelopeError
from tunnel.protocol.body import decode_body, encode_body
from tunnel.protocol import ErrorMessage, RequestMessage, ResponseMessage
from tunnel.config.protocol import ERROR_TARGET_FAILURE, MESSAGE_TARGET_TIMEOUT
from tunnel.protocol.multidict import to_multi_dict, iter_multi_items

from .target import build_target_url
from .headers import strip_hop_headers

logger = logging.getLogger(__name__)


class EgressExecutor:
    """Performs the real HTTP call for a request envelope.

    Every outcome is an envelope: a response for whatever status the target
    returned, an error for transport failures and the timeout.
    """

    def __init__(
        self,
        *,
        target_url: str,
        timeout_s: float,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._target_url = httpx.URL(target_url)
        self._timeout_s = float(timeout_s)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(self._timeout_s))

    @property
    def target_url(self) -> httpx.URL:
        return self._target_url

    def _failure(self, request_id: str, message: str) -> ErrorMessage:
        return ErrorMessage(message=message, request_id=request_id, code=ERROR_TARGET_FAILURE)

    async def execute(self, request: RequestMessage) -> ResponseMessage | ErrorMessage:
        request_id = request.request_id or ""
        try:
            url = build_target_url(self._target_url, request.path, request.query)
            content = decode_body(request.body, request.body_encoding)
        except (EnvelopeError, httpx.InvalidURL) as exc:
            logger.warning("Request %s cannot be issued: %s", request_id, exc)
            return self._failure(request_id, str(exc))

        headers = list(iter_multi_items(strip_hop_headers(request.headers)))
        logger.debug("Request %s -> %s %s", request_id, request.method, url)

        try:
            response = await asyncio.wait_for(
                self._client.request(request.method, url, headers=headers, content=content or None),
                timeout=self._timeout_s,
            )
        except (TimeoutError, httpx.TimeoutException):
            logger.error("Request timeout for %s", request_id)
            return self._failure(request_id, MESSAGE_TARGET_TIMEOUT)
        except httpx.HTTPError as exc:
            logger.error("Request error for %s: %s", request_id, exc)
            return self._failure(request_id, str(exc) or type(exc).__name__)

        body, body_encoding = encode_body(response.content, response.headers.get("content-type"))
        return ResponseMessage(
            request_id=request_id,
            status_code=response.status_code,
            headers=to_multi_dict(response.headers.multi_items(), lower_keys=True),
            body=body,
            body_encoding=body_encoding,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["EgressExecutor"]
