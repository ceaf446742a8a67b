from __future__ import annotations

import logging

import pytest

from tunnel import cli
from tunnel.runtime.logging import configure_logging
from tunnel.runtime.settings_loader import (
    load_broker_settings,
    load_egress_settings,
    load_ingress_settings,
)

_ENV_NAMES = (
    "PORT",
    "BROKER_HOST",
    "RELAY_SERVER_URL",
    "CLIENT_PORT",
    "CLIENT_HOST",
    "CLIENT_ID",
    "REQUEST_TIMEOUT_S",
    "MAX_BODY_BYTES",
    "TARGET_API_URL",
    "TARGET_TIMEOUT_S",
    "RECONNECT_DELAY_S",
    "WS_PING_INTERVAL_S",
    "WS_PING_TIMEOUT_S",
    "WS_MAX_MESSAGE_BYTES",
    "SHOW_LIBRARY_LOGS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    broker = load_broker_settings()
    assert (broker.host, broker.port) == ("0.0.0.0", 8080)

    ingress = load_ingress_settings()
    assert ingress.port == 9983
    assert ingress.client_id.startswith("client_")
    assert ingress.request_timeout_s == 30.0
    assert ingress.max_body_bytes == 10 * 1024 * 1024
    assert ingress.link.relay_url == "ws://localhost:8080/"
    assert ingress.link.reconnect_delay_s == 5.0

    egress = load_egress_settings()
    assert egress.target_url == "http://localhost:8000"
    assert egress.target_timeout_s == 30.0
    assert egress.link.ping_interval_s == 20.0


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("RELAY_SERVER_URL", "wss://relay.example/")
    monkeypatch.setenv("CLIENT_ID", "laptop")
    monkeypatch.setenv("REQUEST_TIMEOUT_S", "2.5")
    monkeypatch.setenv("TARGET_API_URL", "http://10.0.0.5:3000")
    monkeypatch.setenv("RECONNECT_DELAY_S", "1")

    assert load_broker_settings().port == 9000
    ingress = load_ingress_settings()
    assert ingress.client_id == "laptop"
    assert ingress.request_timeout_s == 2.5
    assert ingress.link.relay_url == "wss://relay.example/"
    assert ingress.link.reconnect_delay_s == 1.0
    assert load_egress_settings().target_url == "http://10.0.0.5:3000"


def test_invalid_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "eighty")
    monkeypatch.setenv("REQUEST_TIMEOUT_S", "-3")
    monkeypatch.setenv("TARGET_TIMEOUT_S", "soon")
    monkeypatch.setenv("CLIENT_ID", "   ")

    assert load_broker_settings().port == 8080
    ingress = load_ingress_settings()
    assert ingress.request_timeout_s == 30.0
    assert ingress.client_id.startswith("client_")
    assert load_egress_settings().target_timeout_s == 30.0


def test_configure_logging_quiets_library_loggers() -> None:
    configure_logging("info")
    assert logging.getLogger("websockets").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING


def test_cli_parser_roles() -> None:
    parser = cli._build_parser()

    args = parser.parse_args(["ingress", "--port", "9999", "--client-id", "laptop"])
    assert (args.role, args.port, args.client_id) == ("ingress", 9999, "laptop")
    assert cli._overrides(args, port="port", host="host", client_id="client_id") == {
        "port": 9999,
        "client_id": "laptop",
    }

    args = parser.parse_args(["egress", "--target-url", "http://localhost:3000"])
    assert args.target_url == "http://localhost:3000"

    with pytest.raises(SystemExit):
        parser.parse_args(["gateway"])
