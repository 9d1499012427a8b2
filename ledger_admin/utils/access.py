"""
Scope predicates for centers and services.

These are the only place where scope membership is decided. Guards, handlers
and the data filtering pipeline all call them, so admission and filtering
cannot disagree.
"""
from typing import Any

from ledger_admin.utils.permissions import Role


def is_super_admin(principal: Any) -> bool:
    return getattr(principal, 'role', None) == Role.SUPER_ADMIN.value


def _assigned(principal: Any, attribute: str) -> list:
    values = getattr(principal, attribute, None)
    return values if isinstance(values, (list, tuple, set, frozenset)) else []


def can_access_center(principal: Any, center_ref: Any) -> bool:
    if is_super_admin(principal):
        return True
    return center_ref in _assigned(principal, 'assigned_centers')


def can_access_service(principal: Any, service_ref: Any) -> bool:
    if is_super_admin(principal):
        return True
    return service_ref in _assigned(principal, 'assigned_services')
