from __future__ import annotations

import asyncio
import base64

import httpx
import orjson
import pytest

from tunnel.egress.worker import EgressWorker
from tunnel.egress.executor import EgressExecutor
from tunnel.egress.target import build_target_url
from tunnel.egress.headers import is_hop_header, strip_hop_headers
from tunnel.protocol import Envelope, ErrorMessage, RequestMessage, ResponseMessage


def _executor(handler, *, timeout_s: float = 5.0, target_url: str = "http://api.local:8000") -> EgressExecutor:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return EgressExecutor(target_url=target_url, timeout_s=timeout_s, client=client)


class _FakeLink:
    def __init__(self) -> None:
        self.sent: list[Envelope] = []

    async def send(self, envelope: Envelope) -> bool:
        self.sent.append(envelope)
        return True


def test_strip_hop_headers_is_case_insensitive() -> None:
    headers = {
        "Host": "public.example",
        "Content-Length": "12",
        "Connection": "Upgrade, X-Hop-Only",
        "Upgrade": "websocket",
        "Transfer-Encoding": "chunked",
        "Keep-Alive": "timeout=5",
        "TE": "trailers",
        "Trailer": "Expires",
        "Proxy-Connection": "keep-alive",
        "x-hop-only": "1",
        "Sec-WebSocket-Key": "abc",
        "sec-websocket-foo": "x",
        "Authorization": "Bearer t",
        "accept": ["a", "b"],
    }
    stripped = strip_hop_headers(headers)
    assert stripped == {"Authorization": "Bearer t", "accept": ["a", "b"]}
    assert strip_hop_headers(stripped) == stripped
    assert strip_hop_headers(None) == {}
    assert is_hop_header(" HOST ")


def test_build_target_url_resolution() -> None:
    assert str(build_target_url("http://api.local:8000", "/api/x")) == "http://api.local:8000/api/x"
    assert str(build_target_url("http://api.local/base/", "/api/x")) == "http://api.local/api/x"
    assert str(build_target_url("http://api.local/base/", "api/x")) == "http://api.local/base/api/x"
    assert build_target_url("http://api.local", "//evil.example/x").host == "api.local"


def test_build_target_url_appends_query_in_order() -> None:
    url = build_target_url("http://api.local", "/search", {"tag": ["a", "b"], "q": "x y"})
    assert url.params.get_list("tag") == ["a", "b"]
    assert url.params["q"] == "x y"
    assert url.path == "/search"


@pytest.mark.asyncio
async def test_execute_drops_chunked_framing_headers() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["headers"] = request.headers
        seen["body"] = request.content
        return httpx.Response(200)

    executor = _executor(handler)
    await executor.execute(
        RequestMessage(
            request_id="r1",
            method="POST",
            path="/upload",
            headers={"transfer-encoding": "chunked", "keep-alive": "timeout=5", "te": "trailers"},
            body="hello",
        )
    )

    assert "transfer-encoding" not in seen["headers"]
    assert "keep-alive" not in seen["headers"]
    assert "te" not in seen["headers"]
    assert seen["headers"]["content-length"] == "5"
    assert seen["body"] == b"hello"


def test_build_target_url_keeps_percent_encoded_path() -> None:
    assert build_target_url("http://api.local", "/files/a%3Fb=1").raw_path == b"/files/a%3Fb=1"
    assert build_target_url("http://api.local", "/dir/a%2Fb").raw_path == b"/dir/a%2Fb"


@pytest.mark.asyncio
async def test_execute_forwards_request_and_wraps_response() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = request.content
        return httpx.Response(201, json={"id": 7}, headers={"x-trace": "t1"})

    executor = _executor(handler)
    result = await executor.execute(
        RequestMessage(
            request_id="r1",
            method="POST",
            path="/api/items",
            headers={"content-type": "application/json", "sec-websocket-key": "k", "x-custom": "1"},
            body={"name": "x"},
            query={"v": "2"},
        )
    )
    await executor.aclose()

    assert seen["method"] == "POST"
    assert seen["url"] == "http://api.local:8000/api/items?v=2"
    assert seen["headers"]["x-custom"] == "1"
    assert seen["headers"]["host"] == "api.local:8000"
    assert "sec-websocket-key" not in seen["headers"]
    assert orjson.loads(seen["body"]) == {"name": "x"}

    assert isinstance(result, ResponseMessage)
    assert result.request_id == "r1"
    assert result.status_code == 201
    assert result.body == {"id": 7}
    assert result.headers["x-trace"] == "t1"


@pytest.mark.asyncio
async def test_execute_passes_error_statuses_through() -> None:
    executor = _executor(lambda request: httpx.Response(404, text="missing"))

    result = await executor.execute(RequestMessage(request_id="r1", method="GET", path="/nope"))

    assert isinstance(result, ResponseMessage)
    assert result.status_code == 404
    assert result.body == "missing"


@pytest.mark.asyncio
async def test_execute_sends_body_for_any_method() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = request.content
        return httpx.Response(204)

    executor = _executor(handler)
    result = await executor.execute(
        RequestMessage(request_id="r1", method="DELETE", path="/items/1", body="reason=dup")
    )

    assert seen["body"] == b"reason=dup"
    assert isinstance(result, ResponseMessage)
    assert result.status_code == 204
    assert result.body is None


@pytest.mark.asyncio
async def test_execute_binary_response_is_base64() -> None:
    payload = b"\x89PNG\r\n\x1a\n\x00\xff"
    executor = _executor(lambda request: httpx.Response(200, content=payload, headers={"content-type": "image/png"}))

    result = await executor.execute(RequestMessage(request_id="r1", method="GET", path="/logo.png"))

    assert isinstance(result, ResponseMessage)
    assert result.body_encoding == "base64"
    assert base64.b64decode(result.body) == payload


@pytest.mark.asyncio
async def test_execute_json_null_response_keeps_body() -> None:
    executor = _executor(
        lambda request: httpx.Response(200, content=b"null", headers={"content-type": "application/json"})
    )

    result = await executor.execute(RequestMessage(request_id="r1", method="GET", path="/maybe"))

    assert isinstance(result, ResponseMessage)
    assert result.body == "null"
    assert result.body_encoding is None


@pytest.mark.asyncio
async def test_execute_timeout_is_error_envelope() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1.0)
        return httpx.Response(200)

    executor = _executor(handler, timeout_s=0.05)
    result = await executor.execute(RequestMessage(request_id="r1", method="GET", path="/slow"))

    assert result == ErrorMessage(message="Request timeout", request_id="r1", code="target_failure")


@pytest.mark.asyncio
async def test_execute_transport_failure_is_error_envelope() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    executor = _executor(handler)
    result = await executor.execute(RequestMessage(request_id="r1", method="GET", path="/"))

    assert isinstance(result, ErrorMessage)
    assert result.request_id == "r1"
    assert result.code == "target_failure"
    assert "connection refused" in result.message


@pytest.mark.asyncio
async def test_execute_rejects_bad_base64_body() -> None:
    executor = _executor(lambda request: httpx.Response(200))

    result = await executor.execute(
        RequestMessage(request_id="r1", method="POST", path="/", body="***", body_encoding="base64")
    )

    assert isinstance(result, ErrorMessage)
    assert result.code == "target_failure"


@pytest.mark.asyncio
async def test_worker_replies_for_each_request() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/slow":
            await asyncio.sleep(0.05)
        return httpx.Response(200, text=request.url.path)

    link = _FakeLink()
    worker = EgressWorker(link, _executor(handler))

    await worker.on_envelope(RequestMessage(request_id="slow", method="GET", path="/slow"))
    await worker.on_envelope(RequestMessage(request_id="fast", method="GET", path="/fast"))
    await worker.on_envelope(RequestMessage(request_id=None, method="GET", path="/dropped"))
    assert worker.in_flight == 2
    await asyncio.wait_for(worker.wait_idle(), timeout=1.0)

    assert [env.request_id for env in link.sent] == ["fast", "slow"]
    assert all(isinstance(env, ResponseMessage) for env in link.sent)


@pytest.mark.asyncio
async def test_worker_turns_executor_crash_into_error() -> None:
    class _CrashingExecutor:
        async def execute(self, request: RequestMessage):
            raise RuntimeError("kaboom")

    link = _FakeLink()
    worker = EgressWorker(link, _CrashingExecutor())

    await worker.on_envelope(RequestMessage(request_id="r1", method="GET", path="/"))
    await asyncio.wait_for(worker.wait_idle(), timeout=1.0)

    assert link.sent == [ErrorMessage(message="kaboom", request_id="r1", code="target_failure")]


@pytest.mark.asyncio
async def test_worker_close_cancels_in_flight() -> None:
    started = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        await asyncio.sleep(10)
        return httpx.Response(200)

    link = _FakeLink()
    worker = EgressWorker(link, _executor(handler))
    await worker.on_envelope(RequestMessage(request_id="r1", method="GET", path="/"))
    await asyncio.wait_for(started.wait(), timeout=1.0)

    await worker.close()

    assert link.sent == []
    assert worker.in_flight == 0
