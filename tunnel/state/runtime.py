"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from tunnel.link import BrokerLink
    from tunnel.broker.router import RelayRouter
    from tunnel.egress.worker import EgressWorker
    from tunnel.egress.executor import EgressExecutor
    from tunnel.ingress.adapter import IngressAdapter
    from tunnel.state.settings import BrokerSettings, EgressSettings, IngressSettings


@dataclass(slots=True)
class BrokerDeps:
    router: RelayRouter
    settings: BrokerSettings

    async def shutdown(self) -> None:
        logger.info("broker shutting down with state %s", self.router.snapshot())


@dataclass(slots=True)
class IngressDeps:
    link: BrokerLink
    adapter: IngressAdapter
    settings: IngressSettings
    link_task: asyncio.Task | None = None

    def start(self) -> None:
        if self.link_task is None:
            self.link_task = asyncio.create_task(self.link.run())

    async def shutdown(self) -> None:
        try:
            await self.link.close()
        except Exception:
            logger.exception("ingress link shutdown failed")
        if self.link_task is not None:
            self.link_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self.link_task
            self.link_task = None


@dataclass(slots=True)
class EgressDeps:
    link: BrokerLink
    executor: EgressExecutor
    worker: EgressWorker
    settings: EgressSettings

    async def shutdown(self) -> None:
        try:
            await self.link.close()
            await self.worker.close()
            await self.executor.aclose()
        except Exception:
            logger.exception("egress shutdown failed")


__all__ = ["BrokerDeps", "EgressDeps", "IngressDeps"]
