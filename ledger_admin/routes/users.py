import logging

from flask import Blueprint, current_app
from flask_jwt_extended import create_access_token, decode_token, get_jwt, jwt_required

from ledger_admin.database.models.user import User, hash_password
from ledger_admin.schemas.user_schema import (
    LoginSchema,
    ProfileUpdateSchema,
    UserCreateSchema,
    UserPermissionsSchema,
    UserSchema,
    UserUpdateSchema,
)
from ledger_admin.utils.auth import guarded, require_admin, require_permission, require_super_admin
from ledger_admin.utils.data_filter import filter_entities
from ledger_admin.utils.error_messages import ERROR_MESSAGES
from ledger_admin.utils.errors import ConflictError, ResourceNotFound, ValidationFailed
from ledger_admin.utils.helpers import dump, get_or_404, get_store, validate_request
from ledger_admin.utils.permission_guard import build_user_changes, check_user_deletion
from ledger_admin.utils.permissions import Action, Module
from ledger_admin.utils.response import error_response, success_response

logger = logging.getLogger(__name__)

users_blueprint = Blueprint('users', __name__)


def _ensure_email_available(store, email, user_id=None):
    existing = User.find_by_email(store, email)
    if existing and str(existing.id) != str(user_id):
        raise ConflictError(ERROR_MESSAGES["conflict"]["user_exists"], details={'email': email})


# ---------------- Sessions ----------------

@users_blueprint.route('/users/login', methods=['POST'])
def login():
    """
    Authenticates a user and returns a JWT access token.
    The token's jti is recorded on the user so it can be revoked on logout.
    """
    data = validate_request(LoginSchema(), message=ERROR_MESSAGES["validation"]["missing_credentials"])
    store = get_store()

    user = User.find_by_email(store, data['email'])
    if not user or not user.check_password(data['password']):
        logger.info("Failed login attempt for %s", data['email'])
        return error_response(error_code='invalid_credentials', message=ERROR_MESSAGES["auth"]["invalid_credentials"], status=401)

    access_token = create_access_token(identity=str(user.id), additional_claims={"role": user.role})
    claims = decode_token(access_token)
    user.add_session(store, claims["jti"], claims.get("exp"))
    logger.info("User %s signed in", user.id)

    expires = current_app.config["JWT_ACCESS_TOKEN_EXPIRES"]
    return success_response({
        'user': dump(UserSchema(), user),
        'access_token': access_token,
        'token_type': 'Bearer',
        'expires_in': int(expires.total_seconds()),
    }, message="Authentication successful.")


@users_blueprint.route('/users/logout', methods=['POST'])
@jwt_required()
@guarded()
def logout(ctx):
    """Revokes the presented token only. Other sessions stay valid."""
    ctx.principal.remove_session(get_store(), get_jwt()["jti"])
    return success_response(message="Successfully signed out.")


@users_blueprint.route('/users/logout/all', methods=['POST'])
@jwt_required()
@guarded()
def logout_all(ctx):
    ctx.principal.clear_sessions(get_store())
    return success_response(message="Signed out of all sessions.")


# ---------------- Self Service ----------------

@users_blueprint.route('/users/me', methods=['GET'])
@jwt_required()
@guarded()
def get_me(ctx):
    return success_response(dump(UserSchema(), ctx.principal), message="User profile retrieved successfully")


@users_blueprint.route('/users/me/permissions', methods=['GET'])
@jwt_required()
@guarded()
def get_my_permissions(ctx):
    return success_response({
        'role': ctx.role,
        'permissions': ctx.permissions.to_dict(),
        'granted': ctx.permissions.tokens(),
        'assignedCenters': ctx.principal.assigned_centers,
        'assignedServices': ctx.principal.assigned_services,
    }, message="Permissions retrieved successfully")


@users_blueprint.route('/users/me', methods=['PATCH'])
@jwt_required()
@guarded()
def update_me(ctx):
    """Update the current user's name or password. Role and scope are not editable here."""
    data = validate_request(ProfileUpdateSchema())
    user = ctx.principal

    if 'password' in data:
        old_password = data.pop('old_password', None)
        if not old_password:
            raise ValidationFailed(ERROR_MESSAGES["validation"]["old_password_required"],
                                   details={'oldPassword': ["Missing data for required field."]})
        if not user.check_password(old_password):
            return error_response(error_code='invalid_credentials', message=ERROR_MESSAGES["validation"]["invalid_old_password"], status=401)
        data['password_hash'] = hash_password(data.pop('password'))
    data.pop('old_password', None)

    updated = User.update(get_store(), user.id, data)
    return success_response(dump(UserSchema(), updated), message="Profile updated successfully")


# ---------------- User Management ----------------

@users_blueprint.route('/users', methods=['POST'])
@jwt_required()
@guarded(require_admin(), require_permission(Module.USERS, Action.CREATE))
def create_user(ctx):
    store = get_store()
    payload = validate_request(UserCreateSchema())
    _ensure_email_available(store, payload['email'])

    changes = build_user_changes(ctx.principal, None, payload)
    user = User.create(store, changes)
    logger.info("User %s created by %s with role %s", user.id, ctx.user_id, user.role)
    return success_response(dump(UserSchema(), user), message="User created successfully", status=201)


@users_blueprint.route('/users', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.USERS, Action.VIEW))
def list_users(ctx):
    users = filter_entities('users', User.find_all(get_store()), ctx.principal, ctx.permissions)
    return success_response(dump(UserSchema(), users), meta={'total': len(users)})


@users_blueprint.route('/users/<string:user_id>', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.USERS, Action.VIEW))
def get_user(ctx, user_id: str):
    user = get_or_404(User, user_id, "user")
    return success_response(dump(UserSchema(), user))


def _apply_user_changes(ctx, user_id, schema):
    store = get_store()
    target = get_or_404(User, user_id, "user")
    payload = validate_request(schema)

    changes = build_user_changes(ctx.principal, target, payload)
    if 'email' in changes:
        changes['email'] = changes['email'].strip().lower()
        _ensure_email_available(store, changes['email'], target.id)
    if 'password' in changes:
        changes['password_hash'] = hash_password(changes.pop('password'))

    updated = User.update(store, target.id, changes)
    logger.info("User %s updated by %s: %s", target.id, ctx.user_id,
                sorted(k for k in changes if k != 'password_hash'))
    return updated


@users_blueprint.route('/users/<string:user_id>', methods=['PATCH'])
@jwt_required()
@guarded(require_admin(), require_permission(Module.USERS, Action.EDIT))
def update_user(ctx, user_id: str):
    updated = _apply_user_changes(ctx, user_id, UserUpdateSchema())
    return success_response(dump(UserSchema(), updated), message="User updated successfully")


@users_blueprint.route('/users/<string:user_id>/permissions', methods=['PATCH'])
@jwt_required()
@guarded(require_admin(), require_permission(Module.USERS, Action.EDIT))
def update_user_permissions(ctx, user_id: str):
    updated = _apply_user_changes(ctx, user_id, UserPermissionsSchema())
    return success_response({
        'user': dump(UserSchema(), updated),
        'effectivePermissions': updated.effective_permissions().to_dict(),
    }, message="User permissions updated successfully")


@users_blueprint.route('/users/<string:user_id>', methods=['DELETE'])
@jwt_required()
@guarded(require_super_admin())
def delete_user(ctx, user_id: str):
    check_user_deletion(ctx.principal, user_id)
    target = get_or_404(User, user_id, "user")
    if not User.delete(get_store(), target.id):
        raise ResourceNotFound(ERROR_MESSAGES["not_found"]["user"])
    logger.info("User %s deleted by %s", target.id, ctx.user_id)
    return success_response({'id': target.id}, message="User deleted successfully")
