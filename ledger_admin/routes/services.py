from flask import Blueprint
from flask_jwt_extended import jwt_required

from ledger_admin.database.models.service import Service
from ledger_admin.schemas.service_schema import ServiceSchema
from ledger_admin.utils.auth import ensure_service_access, ensure_entity_scope, guarded, require_permission
from ledger_admin.utils.data_filter import filter_entities
from ledger_admin.utils.error_messages import ERROR_MESSAGES
from ledger_admin.utils.errors import ResourceNotFound
from ledger_admin.utils.helpers import dump, get_or_404, get_store, validate_request
from ledger_admin.utils.permissions import Action, Module
from ledger_admin.utils.response import success_response


services_blueprint = Blueprint('services', __name__)


@services_blueprint.route('/service', methods=['POST'])
@jwt_required()
@guarded(require_permission(Module.SERVICES, Action.CREATE))
def create_service(ctx):
    data = validate_request(ServiceSchema())
    service = Service.create(get_store(), data)
    return success_response(dump(ServiceSchema(), service), message="Service created successfully", status=201)


@services_blueprint.route('/service', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.SERVICES, Action.VIEW))
def list_services(ctx):
    services = filter_entities('services', Service.find_all(get_store()), ctx.principal, ctx.permissions)
    return success_response(dump(ServiceSchema(), services), meta={'total': len(services)})


@services_blueprint.route('/service/<string:service_id>', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.SERVICES, Action.VIEW))
def get_service(ctx, service_id: str):
    service = get_or_404(Service, service_id, "service")
    ensure_entity_scope(ctx, 'services', service)
    return success_response(dump(ServiceSchema(), service))


@services_blueprint.route('/service/<string:service_id>', methods=['PATCH'])
@jwt_required()
@guarded(require_permission(Module.SERVICES, Action.EDIT))
def update_service(ctx, service_id: str):
    service = get_or_404(Service, service_id, "service")
    ensure_entity_scope(ctx, 'services', service)
    data = validate_request(ServiceSchema(), partial=True)
    if 'name' in data:
        # a rename may not move the service out of the editor's scope
        ensure_service_access(ctx, data['name'])
    updated = Service.update(get_store(), service.id, data)
    return success_response(dump(ServiceSchema(), updated), message="Service updated successfully")


@services_blueprint.route('/service/<string:service_id>', methods=['DELETE'])
@jwt_required()
@guarded(require_permission(Module.SERVICES, Action.DELETE))
def delete_service(ctx, service_id: str):
    service = get_or_404(Service, service_id, "service")
    ensure_entity_scope(ctx, 'services', service)
    if not Service.delete(get_store(), service.id):
        raise ResourceNotFound(ERROR_MESSAGES["not_found"]["service"])
    return success_response({'id': service.id}, message="Service deleted successfully")
