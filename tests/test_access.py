# tests/test_access.py

"""
Tests for center/service scope predicates.
"""

from ledger_admin.utils.access import can_access_center, can_access_service, is_super_admin


def test_super_admin_reaches_every_center_and_service(principal):
    root = principal(role="super_admin")
    assert is_super_admin(root)
    assert can_access_center(root, "Anywhere")
    assert can_access_service(root, "Anything")


def test_membership_is_exact(principal):
    worker = principal(centers=["Paris"], services=["Coaching"])
    assert can_access_center(worker, "Paris")
    assert not can_access_center(worker, "paris")
    assert not can_access_center(worker, "Paris 2")
    assert can_access_service(worker, "Coaching")
    assert not can_access_service(worker, "Osteopathy")


def test_admin_is_scoped_like_everyone_else(principal):
    admin = principal(role="admin", centers=["A"])
    assert can_access_center(admin, "A")
    assert not can_access_center(admin, "B")


def test_missing_scope_lists_deny(principal):
    user = principal()
    user.assigned_centers = None
    assert not can_access_center(user, "A")
    assert not can_access_service(user, None)


def test_user_model_delegates_to_predicates(make_user):
    user = make_user("manager", assigned_centers=["A"], assigned_services=["S1"])
    assert user.can_access_center("A")
    assert not user.can_access_center("B")
    assert user.can_access_service("S1")
    assert user.has_permission("services", "edit")
    assert not user.has_permission("users", "view")
