"""
Rules bounding how roles, permission overrides and scope can be changed.

Rules are evaluated in order and the first violation wins:
    1. nobody may set their own role to super_admin
    2. only a super_admin may grant the super_admin role
    3. only a super_admin may modify a super_admin account
    4. scope lists are sanitized (non-string / blank entries dropped)
    5. permission overrides are sanitized (unknown pairs, non-booleans dropped)
    6. a super_admin may not delete their own account
Rules 4 and 5 never fail a request.
"""
import logging
from typing import Any, Dict, List, Optional

from ledger_admin.utils.access import is_super_admin
from ledger_admin.utils.error_messages import ERROR_MESSAGES
from ledger_admin.utils.errors import AuthorizationDenied, ValidationFailed
from ledger_admin.utils.permissions import AVAILABLE_ROLES, Role, sanitize_overrides

logger = logging.getLogger(__name__)

SUPER_ADMIN = Role.SUPER_ADMIN.value


def _same_user(actor: Any, target: Any) -> bool:
    return target is not None and str(getattr(actor, 'id', '')) == str(getattr(target, 'id', None))


def _deny(message: str, actor: Any, **details) -> AuthorizationDenied:
    logger.warning("Permission mutation denied for user=%s role=%s: %s",
                   getattr(actor, 'id', None), getattr(actor, 'role', None), message)
    return AuthorizationDenied(message, details={'userRole': getattr(actor, 'role', None), **details})


def check_role_change(actor: Any, target: Any, requested_role: Optional[str]) -> None:
    """Rules 1 and 2. `target` is None when the user is being created."""
    if requested_role is None:
        return
    if requested_role not in AVAILABLE_ROLES:
        raise ValidationFailed(details={'role': [f"Must be one of: {', '.join(AVAILABLE_ROLES)}."]})
    if requested_role != SUPER_ADMIN:
        return
    if _same_user(actor, target):
        raise _deny(ERROR_MESSAGES["forbidden"]["self_promotion"], actor, requestedRole=requested_role)
    if not is_super_admin(actor):
        raise _deny(ERROR_MESSAGES["forbidden"]["grant_super_admin"], actor, requestedRole=requested_role)


def check_target_modifiable(actor: Any, target: Any) -> None:
    """Rule 3."""
    if getattr(target, 'role', None) == SUPER_ADMIN and not is_super_admin(actor):
        raise _deny(ERROR_MESSAGES["forbidden"]["modify_super_admin"], actor, targetRole=SUPER_ADMIN)


def sanitize_scope(values: Any) -> List[str]:
    """Rule 4: keep non-blank strings, stripped and de-duplicated in order."""
    if not isinstance(values, (list, tuple, set)):
        return []
    clean: List[str] = []
    for value in values:
        if isinstance(value, str) and value.strip() and value.strip() not in clean:
            clean.append(value.strip())
    return clean


def check_user_deletion(actor: Any, target_id: str) -> None:
    """Rule 6."""
    if is_super_admin(actor) and str(getattr(actor, 'id', '')) == str(target_id):
        raise _deny(ERROR_MESSAGES["forbidden"]["self_delete"], actor)


def build_user_changes(actor: Any, target: Any, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply rules 1-5 to a validated update payload and return the changes that
    may be written. Raises AuthorizationDenied on the first violated rule.
    """
    changes = dict(payload)

    check_role_change(actor, target, changes.get('role'))
    if target is not None:
        check_target_modifiable(actor, target)

    for key in ('assigned_centers', 'assigned_services'):
        if key in changes:
            changes[key] = sanitize_scope(changes[key])

    if 'permissions' in changes:
        changes['permissions'] = sanitize_overrides(changes['permissions'])

    return changes
