# tests/test_data_filter.py

"""
Tests for result-set narrowing per data type.
"""

import pytest

from ledger_admin.utils.auth import RequestContext, ensure_entity_scope
from ledger_admin.utils.data_filter import filter_entities, is_visible
from ledger_admin.utils.errors import AuthorizationDenied

TRANSACTIONS = [
    {"id": "1", "center_name": "A", "service_name": "S1"},
    {"id": "2", "center_name": "B", "service_name": "S1"},
    {"id": "3", "center_name": "A", "service_name": "S2"},
    {"id": "4", "center_name": None, "service_name": "S1"},
    {"id": "5"},
]


def ids(entities):
    return [e["id"] for e in entities]


def test_super_admin_sees_everything(principal):
    root = principal(role="super_admin")
    assert filter_entities("transactions", TRANSACTIONS, root) == TRANSACTIONS
    assert filter_entities("users", [{"id": "u"}], root) == [{"id": "u"}]


def test_transactions_need_both_center_and_service_scope(principal):
    worker = principal(centers=["A"], services=["S1"])
    assert ids(filter_entities("transactions", TRANSACTIONS, worker)) == ["1", "4", "5"]


def test_transactions_never_leak_other_centers(principal):
    worker = principal(centers=["A"], services=["S1", "S2"])
    visible = filter_entities("transactions", TRANSACTIONS, worker)
    assert all(t.get("center_name") in (None, "A") for t in visible)


def test_centers_and_services_filtered_by_own_name(principal):
    manager = principal(role="manager", centers=["A"], services=["S2"])
    centers = [{"id": "c1", "name": "A"}, {"id": "c2", "name": "B"}]
    services = [{"id": "s1", "name": "S1"}, {"id": "s2", "name": "S2"}]
    assert ids(filter_entities("centers", centers, manager)) == ["c1"]
    assert ids(filter_entities("services", services, manager)) == ["s2"]


def test_clients_pass_through(principal):
    viewer = principal(role="viewer")
    clients = [{"id": "c1"}, {"id": "c2"}]
    assert filter_entities("clients", clients, viewer) == clients


def test_users_require_users_view(principal):
    users = [{"id": "u1"}, {"id": "u2"}]
    assert filter_entities("users", users, principal(role="manager")) == []
    assert filter_entities("users", users, principal(role="admin")) == users
    granted = principal(role="worker", permissions={"users": {"view": True}})
    assert filter_entities("users", users, granted) == users


def test_unknown_types_pass_through(principal):
    assert filter_entities("reports", [{"id": "r"}], principal()) == [{"id": "r"}]
    assert filter_entities("transactions", None, principal()) == []


def test_is_visible_works_on_objects(principal):
    worker = principal(centers=["A"])
    record = type("Row", (), {"center_name": "B", "service_name": None})()
    assert not is_visible("transactions", record, worker)
    record.center_name = "A"
    assert is_visible("transactions", record, worker)


def _admitted(ctx, data_type, entities):
    admitted = []
    for entity in entities:
        try:
            ensure_entity_scope(ctx, data_type, entity)
        except AuthorizationDenied:
            continue
        admitted.append(entity)
    return admitted


def test_handler_scope_check_matches_list_filter(principal):
    worker = principal("worker", centers=["A"], services=["S1"])
    ctx = RequestContext.for_principal(worker)
    centers = [{"name": "A"}, {"name": "B"}]
    services = [{"name": "S1"}, {"name": "S2"}]

    assert _admitted(ctx, "transactions", TRANSACTIONS) == filter_entities("transactions", TRANSACTIONS, worker)
    assert _admitted(ctx, "centers", centers) == filter_entities("centers", centers, worker)
    assert _admitted(ctx, "services", services) == filter_entities("services", services, worker)


def test_handler_scope_denial_names_the_failing_reference(principal):
    ctx = RequestContext.for_principal(principal("worker", centers=["A"], services=["S1"]))

    with pytest.raises(AuthorizationDenied) as denied:
        ensure_entity_scope(ctx, "transactions", TRANSACTIONS[2])
    assert denied.value.details["serviceName"] == "S2"
    assert "centerName" not in denied.value.details

    with pytest.raises(AuthorizationDenied) as denied:
        ensure_entity_scope(ctx, "transactions", TRANSACTIONS[1])
    assert denied.value.details["centerName"] == "B"
