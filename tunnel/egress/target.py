"""Target URL construction for the egress executor."""

from __future__ import annotations

import httpx

from tunnel.protocol.envelope import Query
from tunnel.protocol.multidict import iter_multi_items


def build_target_url(base_url: str | httpx.URL, path: str, query: Query | None = None) -> httpx.URL:
    """Resolve *path* against *base_url* (RFC 3986) and append *query* in order.

    An absolute path replaces the base path; a relative one resolves against the
    base's last segment. Leading ``//`` is collapsed so a path can never name a
    different host.
    """
    if path.startswith("//"):
        path = "/" + path.lstrip("/")
    url = httpx.URL(base_url).join(path)
    for key, value in iter_multi_items(query):
        url = url.copy_add_param(key, value)
    return url


__all__ = ["build_target_url"]
