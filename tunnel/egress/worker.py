"""Dispatch of broker envelopes to the egress executor."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from tunnel.link import BrokerLink
from tunnel.config.protocol import ERROR_TARGET_FAILURE
from tunnel.protocol import Envelope, ErrorMessage, RequestMessage, ResponseMessage

from .executor import EgressExecutor

logger = logging.getLogger(__name__)


class EgressWorker:
    """Runs each request in its own task so replies may complete out of order."""

    def __init__(self, link: BrokerLink, executor: EgressExecutor) -> None:
        self._link = link
        self._executor = executor
        self._tasks: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def on_envelope(self, envelope: Envelope) -> None:
        if isinstance(envelope, RequestMessage):
            if envelope.request_id is None:
                logger.warning("Dropping request without a request id: %s %s", envelope.method, envelope.path)
                return
            task = asyncio.create_task(self._process(envelope))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        elif isinstance(envelope, ErrorMessage):
            logger.warning("Relay server reported an error: %s", envelope.message)
        else:
            logger.info("Unexpected message type: %s", type(envelope).__name__)

    async def _process(self, request: RequestMessage) -> None:
        logger.info("Processing request %s: %s %s", request.request_id, request.method, request.path)
        try:
            result = await self._executor.execute(request)
        except Exception as exc:
            logger.exception("Error processing request %s", request.request_id)
            result = ErrorMessage(
                message=str(exc) or type(exc).__name__,
                request_id=request.request_id,
                code=ERROR_TARGET_FAILURE,
            )
        if not await self._link.send(result):
            logger.warning("Result for %s not delivered; relay connection is down", request.request_id)
            return
        if isinstance(result, ResponseMessage):
            logger.info("Response %s sent: %s", request.request_id, result.status_code)
        else:
            logger.info("Error response %s sent: %s", request.request_id, result.message)

    async def wait_idle(self) -> None:
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task


__all__ = ["EgressWorker"]
