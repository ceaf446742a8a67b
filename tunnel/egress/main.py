"""Egress process entry point: broker link plus executor, no HTTP server."""

from __future__ import annotations

import signal
import asyncio
import logging
import contextlib

from tunnel.state.settings import EgressSettings
from tunnel.runtime.dependencies import build_egress_deps

logger = logging.getLogger(__name__)


async def run_egress(settings: EgressSettings | None = None) -> None:
    runtime_deps = build_egress_deps(settings)
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, lambda: asyncio.create_task(runtime_deps.link.close()))

    logger.info("egress: forwarding to %s", runtime_deps.settings.target_url)
    try:
        await runtime_deps.link.run()
    finally:
        logger.info("Shutting down master proxy...")
        await runtime_deps.shutdown()


__all__ = ["run_egress"]
