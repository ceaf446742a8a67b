"""Environment parsing for runtime settings."""

from __future__ import annotations

import os
import uuid

from tunnel.config.protocol import INGRESS_ID_PREFIX
from tunnel.config.broker import (
    ENV_BROKER_HOST,
    ENV_BROKER_PORT,
    DEFAULT_BROKER_HOST,
    DEFAULT_BROKER_PORT,
)
from tunnel.config.egress import (
    ENV_TARGET_API_URL,
    ENV_TARGET_TIMEOUT_S,
    DEFAULT_TARGET_API_URL,
    DEFAULT_TARGET_TIMEOUT_S,
)
from tunnel.state.settings import (
    LinkSettings,
    BrokerSettings,
    EgressSettings,
    IngressSettings,
)
from tunnel.config.link import (
    ENV_RELAY_SERVER_URL,
    ENV_RECONNECT_DELAY_S,
    ENV_WS_PING_TIMEOUT_S,
    ENV_WS_PING_INTERVAL_S,
    DEFAULT_RELAY_SERVER_URL,
    ENV_WS_MAX_MESSAGE_BYTES,
    DEFAULT_RECONNECT_DELAY_S,
    DEFAULT_WS_PING_TIMEOUT_S,
    DEFAULT_WS_PING_INTERVAL_S,
    DEFAULT_WS_MAX_MESSAGE_BYTES,
)
from tunnel.config.ingress import (
    ENV_CLIENT_ID,
    ENV_CLIENT_HOST,
    ENV_CLIENT_PORT,
    ENV_MAX_BODY_BYTES,
    DEFAULT_CLIENT_HOST,
    DEFAULT_CLIENT_PORT,
    ENV_REQUEST_TIMEOUT_S,
    DEFAULT_MAX_BODY_BYTES,
    DEFAULT_REQUEST_TIMEOUT_S,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _positive(value: float, default: float) -> float:
    return value if value > 0 else default


def _load_link_settings() -> LinkSettings:
    return LinkSettings(
        relay_url=_str_env(ENV_RELAY_SERVER_URL, DEFAULT_RELAY_SERVER_URL),
        reconnect_delay_s=max(0.0, _float_env(ENV_RECONNECT_DELAY_S, DEFAULT_RECONNECT_DELAY_S)),
        ping_interval_s=_positive(_float_env(ENV_WS_PING_INTERVAL_S, DEFAULT_WS_PING_INTERVAL_S), DEFAULT_WS_PING_INTERVAL_S),
        ping_timeout_s=_positive(_float_env(ENV_WS_PING_TIMEOUT_S, DEFAULT_WS_PING_TIMEOUT_S), DEFAULT_WS_PING_TIMEOUT_S),
        max_message_bytes=max(1, _int_env(ENV_WS_MAX_MESSAGE_BYTES, DEFAULT_WS_MAX_MESSAGE_BYTES)),
    )


def load_broker_settings() -> BrokerSettings:
    return BrokerSettings(
        host=_str_env(ENV_BROKER_HOST, DEFAULT_BROKER_HOST),
        port=_int_env(ENV_BROKER_PORT, DEFAULT_BROKER_PORT),
    )


def load_ingress_settings() -> IngressSettings:
    return IngressSettings(
        host=_str_env(ENV_CLIENT_HOST, DEFAULT_CLIENT_HOST),
        port=_int_env(ENV_CLIENT_PORT, DEFAULT_CLIENT_PORT),
        client_id=_str_env(ENV_CLIENT_ID, f"{INGRESS_ID_PREFIX}{uuid.uuid4()}"),
        request_timeout_s=_positive(_float_env(ENV_REQUEST_TIMEOUT_S, DEFAULT_REQUEST_TIMEOUT_S), DEFAULT_REQUEST_TIMEOUT_S),
        max_body_bytes=max(0, _int_env(ENV_MAX_BODY_BYTES, DEFAULT_MAX_BODY_BYTES)),
        link=_load_link_settings(),
    )


def load_egress_settings() -> EgressSettings:
    return EgressSettings(
        target_url=_str_env(ENV_TARGET_API_URL, DEFAULT_TARGET_API_URL),
        target_timeout_s=_positive(_float_env(ENV_TARGET_TIMEOUT_S, DEFAULT_TARGET_TIMEOUT_S), DEFAULT_TARGET_TIMEOUT_S),
        link=_load_link_settings(),
    )


__all__ = ["load_broker_settings", "load_egress_settings", "load_ingress_settings"]
