"""
Post-fetch narrowing of result sets to what the current principal may see.

The route guards decide whether a principal may touch a module at all; this
module decides which instances of it are returned.
"""
import logging
from typing import Any, Iterable, List, Mapping, Optional

from ledger_admin.utils.access import can_access_center, can_access_service, is_super_admin
from ledger_admin.utils.permissions import Action, Module, PermissionMatrix, effective_permissions, has_permission

logger = logging.getLogger(__name__)


def _field(entity: Any, name: str) -> Any:
    if isinstance(entity, Mapping):
        return entity.get(name)
    return getattr(entity, name, None)


def _transaction_visible(transaction: Any, principal: Any) -> bool:
    # A missing scoping field does not hide the transaction.
    center_name = _field(transaction, 'center_name')
    if center_name and not can_access_center(principal, center_name):
        return False
    service_name = _field(transaction, 'service_name')
    if service_name and not can_access_service(principal, service_name):
        return False
    return True


def _principal_matrix(principal: Any, permissions: Optional[PermissionMatrix]) -> PermissionMatrix:
    if permissions is not None:
        return permissions
    return effective_permissions(getattr(principal, 'role', None), getattr(principal, 'permissions', None))


def is_visible(data_type: str, entity: Any, principal: Any, permissions: Optional[PermissionMatrix] = None) -> bool:
    """Single-entity form of `filter_entities`."""
    if is_super_admin(principal):
        return True

    if data_type == 'transactions':
        return _transaction_visible(entity, principal)
    if data_type == 'centers':
        return can_access_center(principal, _field(entity, 'name'))
    if data_type == 'services':
        return can_access_service(principal, _field(entity, 'name'))
    if data_type == 'users':
        return has_permission(_principal_matrix(principal, permissions), Module.USERS, Action.VIEW)
    # clients are shared across centers; other types have no scoping rule
    return True


def filter_entities(data_type: str, entities: Iterable[Any], principal: Any,
                    permissions: Optional[PermissionMatrix] = None) -> List[Any]:
    entities = list(entities or [])

    if is_super_admin(principal):
        return entities

    if data_type == 'users':
        if has_permission(_principal_matrix(principal, permissions), Module.USERS, Action.VIEW):
            return entities
        return []

    if data_type not in ('transactions', 'centers', 'services'):
        return entities

    visible = [e for e in entities if is_visible(data_type, e, principal, permissions)]
    logger.debug(
        "Filtered %s for role=%s: %d of %d visible",
        data_type, getattr(principal, 'role', None), len(visible), len(entities),
    )
    return visible
