"""Header filtering for requests re-issued against the target API."""

from __future__ import annotations

from collections.abc import Mapping

from tunnel.protocol.envelope import MultiValue
from tunnel.protocol.multidict import iter_multi_items
from tunnel.config.egress import STRIPPED_REQUEST_HEADERS


def is_hop_header(name: str) -> bool:
    lowered = name.strip().lower()
    return lowered in STRIPPED_REQUEST_HEADERS or lowered.startswith("sec-websocket-")


def _connection_tokens(headers: Mapping[str, MultiValue]) -> set[str]:
    # Headers named by `Connection` are hop-by-hop for this request too.
    tokens: set[str] = set()
    for name, value in iter_multi_items(headers):
        if name.strip().lower() == "connection":
            tokens.update(t.strip().lower() for t in value.split(",") if t.strip())
    return tokens


def strip_hop_headers(headers: Mapping[str, MultiValue] | None) -> dict[str, MultiValue]:
    """Drop transport headers, matching names case-insensitively. Idempotent."""
    headers = headers or {}
    named = _connection_tokens(headers)
    return {
        name: value
        for name, value in headers.items()
        if not is_hop_header(name) and name.strip().lower() not in named
    }


__all__ = ["is_hop_header", "strip_hop_headers"]
