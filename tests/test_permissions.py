# tests/test_permissions.py

"""
Tests for the role matrices and the override merge.
"""

import pytest

from ledger_admin.utils.permissions import (
    AVAILABLE_ROLES,
    MODULE_ACTIONS,
    Action,
    Module,
    Role,
    default_matrix,
    effective_permissions,
    has_permission,
    normalize_role,
    permission_catalogue,
    sanitize_overrides,
)


@pytest.mark.parametrize("role", AVAILABLE_ROLES)
def test_default_matrix_is_total(role):
    matrix = default_matrix(role)
    for module, actions in MODULE_ACTIONS.items():
        for action in actions:
            assert isinstance(matrix.allows(module, action), bool)


def test_super_admin_holds_everything():
    matrix = default_matrix(Role.SUPER_ADMIN)
    assert all(all(actions.values()) for actions in matrix.to_dict().values())


def test_role_presets_match_expected_grants():
    assert default_matrix("admin").allows("users", "create")
    assert not default_matrix("admin").allows("users", "delete")
    assert not default_matrix("admin").allows("centers", "delete")
    assert default_matrix("manager").allows("services", "edit")
    assert not default_matrix("manager").allows("transactions", "delete")
    assert default_matrix("worker").allows("transactions", "create")
    assert not default_matrix("worker").allows("transactions", "edit")
    assert not default_matrix("viewer").allows("clients", "create")
    assert default_matrix("viewer").allows("costs", "view")


def test_unknown_role_falls_back_to_viewer():
    assert normalize_role("owner") is Role.VIEWER
    assert normalize_role(None) is Role.VIEWER
    assert default_matrix("owner") == default_matrix("viewer")


def test_unknown_pairs_are_denied():
    matrix = default_matrix("super_admin")
    assert matrix.allows("transactions", "export") is False
    assert matrix.allows("bogus", "view") is False
    assert has_permission(None, "transactions", "view") is False


def test_sanitize_keeps_only_known_boolean_pairs():
    raw = {
        "transactions": {"view": True, "exploit": True},
        "bogusModule": {"view": True},
    }
    assert sanitize_overrides(raw) == {"transactions": {"view": True}}


def test_sanitize_drops_non_boolean_values():
    raw = {"clients": {"create": "true", "edit": 1, "delete": False}, "users": "all"}
    assert sanitize_overrides(raw) == {"clients": {"delete": False}}
    assert sanitize_overrides(["transactions"]) == {}
    assert sanitize_overrides(None) == {}


def test_effective_permissions_apply_overrides_only_where_set():
    overrides = {"transactions": {"delete": True}, "dashboard": {"view": False}}
    matrix = effective_permissions("worker", overrides)
    base = default_matrix("worker")

    assert matrix.allows(Module.TRANSACTIONS, Action.DELETE) is True
    assert matrix.allows(Module.DASHBOARD, Action.VIEW) is False
    for module, actions in MODULE_ACTIONS.items():
        for action in actions:
            if (module, action) in ((Module.TRANSACTIONS, Action.DELETE), (Module.DASHBOARD, Action.VIEW)):
                continue
            assert matrix.allows(module, action) == base.allows(module, action)


def test_invalid_overrides_have_no_effect():
    overrides = {"users": {"view": "yes"}, "reports": {"purge": True}}
    assert effective_permissions("viewer", overrides) == default_matrix("viewer")


def test_matrix_serializes_as_nested_dict():
    as_dict = default_matrix("viewer").to_dict()
    assert set(as_dict) == {m.value for m in Module}
    assert as_dict["reports"] == {"view": False, "export": False}
    assert "transactions:view" in default_matrix("viewer").tokens()


def test_catalogue_lists_roles_modules_and_defaults():
    catalogue = permission_catalogue()
    assert catalogue["roles"] == list(AVAILABLE_ROLES)
    assert catalogue["modules"]["dashboard"] == ["view", "edit"]
    assert catalogue["defaults"]["manager"]["costs"]["delete"] is False
