"""Multi-value mappings for headers and query strings.

A key that occurs once maps to a string; a repeated key maps to the list of its
values in arrival order.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from .envelope import MultiValue


def to_multi_dict(items: Iterable[tuple[str, str]], *, lower_keys: bool = False) -> dict[str, MultiValue]:
    out: dict[str, MultiValue] = {}
    for key, value in items:
        if lower_keys:
            key = key.lower()
        current = out.get(key)
        if current is None:
            out[key] = value
        elif isinstance(current, list):
            current.append(value)
        else:
            out[key] = [current, value]
    return out


def iter_multi_items(mapping: Mapping[str, MultiValue] | None) -> Iterator[tuple[str, str]]:
    if not mapping:
        return
    for key, value in mapping.items():
        if isinstance(value, list):
            for item in value:
                yield key, item
        else:
            yield key, value


__all__ = ["iter_multi_items", "to_multi_dict"]
