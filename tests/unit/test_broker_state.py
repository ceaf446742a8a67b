from __future__ import annotations

import pytest

from tunnel.protocol import Role
from tunnel.broker.pending import PendingRequestTable
from tunnel.broker.registry import ConnectionRegistry
from tunnel.broker.connection import BrokerConnection


def _conn(connection_id: str, role: Role) -> BrokerConnection:
    return BrokerConnection(object(), connection_id=connection_id, role=role)


def test_registry_egress_is_last_writer_wins() -> None:
    registry = ConnectionRegistry()
    first = _conn("m1", Role.EGRESS)
    second = _conn("m2", Role.EGRESS)

    assert registry.set_egress(first) is None
    assert registry.is_current_egress(first)

    assert registry.set_egress(second) is first
    assert first.inert
    assert not registry.is_current_egress(first)
    assert registry.is_current_egress(second)

    # The retired handle closing later must not evict the live one.
    assert registry.remove(first) is False
    assert registry.egress is second

    assert registry.remove(second) is True
    assert not registry.has_egress()
    assert second.inert


def test_registry_rejects_wrong_roles() -> None:
    registry = ConnectionRegistry()
    with pytest.raises(ValueError):
        registry.set_egress(_conn("c1", Role.INGRESS))
    with pytest.raises(ValueError):
        registry.add_ingress(_conn("m1", Role.EGRESS))


def test_registry_ingress_reuse_of_id() -> None:
    registry = ConnectionRegistry()
    old = _conn("laptop", Role.INGRESS)
    new = _conn("laptop", Role.INGRESS)

    assert registry.add_ingress(old) is None
    assert registry.add_ingress(new) is old
    assert registry.get_ingress("laptop") is new

    assert registry.remove(old) is False
    assert registry.get_ingress("laptop") is new
    assert registry.ingress_count() == 1

    assert registry.remove(new) is True
    assert registry.ingress_count() == 0


def test_pending_table_add_pop_and_duplicates() -> None:
    table = PendingRequestTable()
    owner = _conn("c1", Role.INGRESS)

    route = table.add("r1", owner)
    assert route is not None
    assert route.owner is owner
    assert table.add("r1", owner) is None
    assert "r1" in table
    assert len(table) == 1

    assert table.pop("r1") is route
    assert table.pop("r1") is None
    assert len(table) == 0
    assert table.owned_by(owner) == frozenset()


def test_pending_table_purges_only_owner_routes() -> None:
    table = PendingRequestTable()
    a = _conn("a", Role.INGRESS)
    b = _conn("b", Role.INGRESS)
    table.add("r2", a)
    table.add("r1", a)
    table.add("r3", b)

    assert table.purge_owner(a) == ["r1", "r2"]
    assert "r1" not in table
    assert "r3" in table
    assert table.owned_by(b) == frozenset({"r3"})
    assert table.purge_owner(a) == []
