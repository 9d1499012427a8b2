from flask import Blueprint
from flask_jwt_extended import jwt_required

from ledger_admin.database.models.center import Center
from ledger_admin.schemas.center_schema import CenterSchema
from ledger_admin.utils.auth import ensure_center_access, ensure_entity_scope, guarded, require_permission
from ledger_admin.utils.data_filter import filter_entities
from ledger_admin.utils.error_messages import ERROR_MESSAGES
from ledger_admin.utils.errors import ResourceNotFound
from ledger_admin.utils.helpers import dump, get_or_404, get_store, validate_request
from ledger_admin.utils.permissions import Action, Module
from ledger_admin.utils.response import success_response


centers_blueprint = Blueprint('centers', __name__)


@centers_blueprint.route('/center', methods=['POST'])
@jwt_required()
@guarded(require_permission(Module.CENTERS, Action.CREATE))
def create_center(ctx):
    data = validate_request(CenterSchema())
    center = Center.create(get_store(), data)
    return success_response(dump(CenterSchema(), center), message="Center created successfully", status=201)


@centers_blueprint.route('/center', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.CENTERS, Action.VIEW))
def list_centers(ctx):
    centers = filter_entities('centers', Center.find_all(get_store()), ctx.principal, ctx.permissions)
    return success_response(dump(CenterSchema(), centers), meta={'total': len(centers)})


@centers_blueprint.route('/center/<string:center_id>', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.CENTERS, Action.VIEW))
def get_center(ctx, center_id: str):
    center = get_or_404(Center, center_id, "center")
    ensure_entity_scope(ctx, 'centers', center)
    return success_response(dump(CenterSchema(), center))


@centers_blueprint.route('/center/<string:center_id>', methods=['PATCH'])
@jwt_required()
@guarded(require_permission(Module.CENTERS, Action.EDIT))
def update_center(ctx, center_id: str):
    center = get_or_404(Center, center_id, "center")
    ensure_entity_scope(ctx, 'centers', center)
    data = validate_request(CenterSchema(), partial=True)
    if 'name' in data:
        # a rename may not move the center out of the editor's scope
        ensure_center_access(ctx, data['name'])
    updated = Center.update(get_store(), center.id, data)
    return success_response(dump(CenterSchema(), updated), message="Center updated successfully")


@centers_blueprint.route('/center/<string:center_id>', methods=['DELETE'])
@jwt_required()
@guarded(require_permission(Module.CENTERS, Action.DELETE))
def delete_center(ctx, center_id: str):
    center = get_or_404(Center, center_id, "center")
    ensure_entity_scope(ctx, 'centers', center)
    if not Center.delete(get_store(), center.id):
        raise ResourceNotFound(ERROR_MESSAGES["not_found"]["center"])
    return success_response({'id': center.id}, message="Center deleted successfully")
