from __future__ import annotations

import asyncio
import contextlib

import pytest
from fastapi.testclient import TestClient

from tunnel.egress.main import run_egress
from tunnel.ingress.server import create_ingress_app
from tunnel.runtime.dependencies import build_egress_deps, build_ingress_deps
from tunnel.state.settings import LinkSettings, EgressSettings, IngressSettings

# Nothing listens on the discard port; connects fail at once.
_UNREACHABLE_RELAY = "ws://127.0.0.1:9/"


def _link() -> LinkSettings:
    return LinkSettings(
        relay_url=_UNREACHABLE_RELAY,
        reconnect_delay_s=0.01,
        ping_interval_s=20.0,
        ping_timeout_s=20.0,
        max_message_bytes=1024 * 1024,
    )


def _ingress_settings() -> IngressSettings:
    return IngressSettings(
        host="127.0.0.1",
        port=0,
        client_id="laptop",
        request_timeout_s=1.0,
        max_body_bytes=1024,
        link=_link(),
    )


def _egress_settings() -> EgressSettings:
    return EgressSettings(target_url="http://127.0.0.1:9", target_timeout_s=1.0, link=_link())


@pytest.mark.asyncio
async def test_ingress_deps_start_and_shutdown() -> None:
    deps = build_ingress_deps(_ingress_settings())
    deps.start()
    assert deps.link_task is not None

    await asyncio.sleep(0.05)
    assert not deps.link.is_connected
    assert deps.link.connect_attempts >= 1

    await deps.shutdown()
    assert deps.link_task is None


@pytest.mark.asyncio
async def test_egress_deps_shutdown_is_clean() -> None:
    deps = build_egress_deps(_egress_settings())
    assert deps.worker.in_flight == 0
    await deps.shutdown()


@pytest.mark.asyncio
async def test_run_egress_retries_until_cancelled() -> None:
    task = asyncio.create_task(run_egress(_egress_settings()))
    await asyncio.sleep(0.05)
    assert not task.done()

    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await asyncio.wait_for(task, timeout=1.0)


def test_ingress_app_with_unreachable_relay_answers_503() -> None:
    with TestClient(create_ingress_app(_ingress_settings())) as client:
        resp = client.post("/api/items", json={"a": 1})
    assert resp.status_code == 503
