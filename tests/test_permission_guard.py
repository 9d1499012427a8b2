# tests/test_permission_guard.py

"""
Tests for the rules bounding role, override and scope changes.
"""

import pytest

from ledger_admin.utils.errors import AuthorizationDenied, ValidationFailed
from ledger_admin.utils.permission_guard import (
    build_user_changes,
    check_role_change,
    check_user_deletion,
    sanitize_scope,
)


def test_nobody_promotes_themself(principal):
    for role in ("admin", "super_admin"):
        actor = principal(role=role, id="me")
        with pytest.raises(AuthorizationDenied):
            check_role_change(actor, actor, "super_admin")


def test_only_super_admin_grants_super_admin(principal):
    admin = principal(role="admin", id="a")
    root = principal(role="super_admin", id="r")
    target = principal(role="viewer", id="t")

    with pytest.raises(AuthorizationDenied) as exc:
        check_role_change(admin, target, "super_admin")
    assert exc.value.details["userRole"] == "admin"

    check_role_change(root, target, "super_admin")
    check_role_change(admin, None, "manager")


def test_invalid_role_is_a_validation_error(principal):
    with pytest.raises(ValidationFailed):
        check_role_change(principal(role="super_admin"), None, "owner")


def test_only_super_admin_modifies_super_admin(principal):
    admin = principal(role="admin", id="a")
    target = principal(role="super_admin", id="r2")
    with pytest.raises(AuthorizationDenied):
        build_user_changes(admin, target, {"first_name": "New"})
    changes = build_user_changes(principal(role="super_admin", id="r1"), target, {"first_name": "New"})
    assert changes == {"first_name": "New"}


def test_self_promotion_wins_over_other_fields(principal):
    admin = principal(role="admin", id="me")
    payload = {"role": "super_admin", "permissions": {"users": {"delete": True}}, "assigned_centers": ["A"]}
    with pytest.raises(AuthorizationDenied):
        build_user_changes(admin, admin, payload)


def test_scope_lists_are_sanitized_not_rejected():
    assert sanitize_scope(["A", " B ", "", "   ", 3, None, "A"]) == ["A", "B"]
    assert sanitize_scope("A") == []
    assert sanitize_scope(None) == []


def test_overrides_and_scope_sanitized_in_changes(principal):
    admin = principal(role="admin", id="a")
    target = principal(role="worker", id="t")
    payload = {
        "permissions": {"transactions": {"view": True, "exploit": True}, "bogusModule": {"view": True}},
        "assigned_services": ["S1", 42, ""],
    }
    changes = build_user_changes(admin, target, payload)
    assert changes["permissions"] == {"transactions": {"view": True}}
    assert changes["assigned_services"] == ["S1"]


def test_super_admin_cannot_delete_themself(principal):
    root = principal(role="super_admin", id="root")
    with pytest.raises(AuthorizationDenied):
        check_user_deletion(root, "root")
    check_user_deletion(root, "someone-else")
