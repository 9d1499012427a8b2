"""
Authorization guards for Flask views.

A view declares its requirements as an ordered list of guards:

    @transactions_blueprint.route('/transaction', methods=['POST'])
    @jwt_required()
    @guarded(require_permission(Module.TRANSACTIONS, Action.CREATE))
    def create_transaction(ctx):
        ...

`guarded` must be placed AFTER `@jwt_required()`. It resolves the principal
once, computes its effective permissions once, and runs each guard against that
same `RequestContext`. A guard returns None to let the request continue, or an
ApiError which becomes the response. The view receives the context as `ctx`.
"""
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Optional

from flask import request
from flask_jwt_extended import get_current_user

from ledger_admin.utils.access import can_access_center, can_access_service
from ledger_admin.utils.data_filter import is_visible
from ledger_admin.utils.error_messages import ERROR_MESSAGES
from ledger_admin.utils.errors import ApiError, AuthenticationRequired, AuthorizationDenied, ValidationFailed
from ledger_admin.utils.permissions import (
    ADMIN_ROLES,
    PermissionMatrix,
    Role,
    effective_permissions,
    permission_token,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    principal: Any
    permissions: PermissionMatrix

    @classmethod
    def for_principal(cls, principal: Any) -> 'RequestContext':
        return cls(
            principal=principal,
            permissions=effective_permissions(getattr(principal, 'role', None), getattr(principal, 'permissions', None)),
        )

    @property
    def role(self) -> Optional[str]:
        return getattr(self.principal, 'role', None)

    @property
    def user_id(self) -> Optional[str]:
        return getattr(self.principal, 'id', None)

    def can(self, module, action) -> bool:
        return self.permissions.allows(module, action)

    def scope_details(self) -> dict:
        return {
            'userRole': self.role,
            'assignedCenters': list(getattr(self.principal, 'assigned_centers', None) or []),
            'assignedServices': list(getattr(self.principal, 'assigned_services', None) or []),
        }


Guard = Callable[[RequestContext], Optional[ApiError]]


def guarded(*guards: Guard):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            principal = get_current_user()
            if principal is None:
                return AuthenticationRequired().to_response()

            ctx = RequestContext.for_principal(principal)
            for guard in guards:
                denial = guard(ctx)
                if denial is not None:
                    logger.warning(
                        "Denied %s %s for user=%s role=%s: %s %s",
                        request.method, request.path, ctx.user_id, ctx.role, denial.code, denial.details,
                    )
                    return denial.to_response()

            return fn(*args, ctx=ctx, **kwargs)
        return wrapper
    return decorator


# --- Guards ---

def require_permission(module, action) -> Guard:
    token = permission_token(module, action)
    module_name, action_name = token.split(':')

    def guard(ctx: RequestContext) -> Optional[ApiError]:
        if ctx.can(module, action):
            return None
        return AuthorizationDenied(
            ERROR_MESSAGES["forbidden"]["permission"].format(action=action_name, module=module_name),
            details={'requiredPermission': token, **ctx.scope_details()},
        )

    guard.__name__ = f"require_permission[{token}]"
    return guard


def require_admin() -> Guard:
    def guard(ctx: RequestContext) -> Optional[ApiError]:
        if ctx.role in ADMIN_ROLES:
            return None
        return AuthorizationDenied(ERROR_MESSAGES["forbidden"]["admin"], details={'userRole': ctx.role})
    return guard


def require_super_admin() -> Guard:
    def guard(ctx: RequestContext) -> Optional[ApiError]:
        if ctx.role == Role.SUPER_ADMIN.value:
            return None
        return AuthorizationDenied(ERROR_MESSAGES["forbidden"]["super_admin"], details={'userRole': ctx.role})
    return guard


def resolve_reference(param: str) -> Any:
    """Look up `param` in the path, then the JSON body, then the query string."""
    value = (request.view_args or {}).get(param)
    if value in (None, ''):
        body = request.get_json(silent=True)
        if isinstance(body, dict):
            value = body.get(param)
    if value in (None, ''):
        value = request.args.get(param)
    return value


def _scope_guard(param: str, predicate, missing_message: str, denied_message: str, detail_key: str) -> Guard:
    def guard(ctx: RequestContext) -> Optional[ApiError]:
        ref = resolve_reference(param)
        if ref in (None, ''):
            return ValidationFailed(missing_message, details={param: ["Missing data for required field."]})
        if predicate(ctx.principal, ref):
            return None
        return AuthorizationDenied(denied_message, details={detail_key: ref, **ctx.scope_details()})
    return guard


def require_center_access(param: str = 'centerName') -> Guard:
    return _scope_guard(
        param, can_access_center,
        ERROR_MESSAGES["validation"]["center_required"], ERROR_MESSAGES["forbidden"]["center"], 'centerName',
    )


def require_service_access(param: str = 'serviceName') -> Guard:
    return _scope_guard(
        param, can_access_service,
        ERROR_MESSAGES["validation"]["service_required"], ERROR_MESSAGES["forbidden"]["service"], 'serviceName',
    )


# --- Handler-side scope checks ---
# Used when the scope lives on the stored entity and cannot be known from the URL.

def _scope_denied(ctx: RequestContext, kind: str, ref: Any) -> AuthorizationDenied:
    logger.warning("%s scope denied for user=%s role=%s: %r", kind.title(), ctx.user_id, ctx.role, ref)
    return AuthorizationDenied(ERROR_MESSAGES["forbidden"][kind], details={f'{kind}Name': ref, **ctx.scope_details()})


def ensure_center_access(ctx: RequestContext, center_ref: Any) -> None:
    if not can_access_center(ctx.principal, center_ref):
        raise _scope_denied(ctx, 'center', center_ref)


def ensure_service_access(ctx: RequestContext, service_ref: Any) -> None:
    if not can_access_service(ctx.principal, service_ref):
        raise _scope_denied(ctx, 'service', service_ref)


def ensure_entity_scope(ctx: RequestContext, data_type: str, entity: Any) -> None:
    """
    Raise AuthorizationDenied unless `entity` would survive the list filter for
    this principal. Visibility itself is decided by `is_visible` only; this
    function just names the reference that failed.
    """
    if is_visible(data_type, entity, ctx.principal, ctx.permissions):
        return

    def field(name):
        return entity.get(name) if isinstance(entity, dict) else getattr(entity, name, None)

    if data_type == 'transactions':
        center_name = field('center_name')
        if center_name and not can_access_center(ctx.principal, center_name):
            raise _scope_denied(ctx, 'center', center_name)
        raise _scope_denied(ctx, 'service', field('service_name'))
    if data_type == 'centers':
        raise _scope_denied(ctx, 'center', field('name'))
    if data_type == 'services':
        raise _scope_denied(ctx, 'service', field('name'))
    raise AuthorizationDenied(details={'dataType': data_type, **ctx.scope_details()})
