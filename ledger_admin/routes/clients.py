import logging

from flask import Blueprint
from flask_jwt_extended import jwt_required

from ledger_admin.database.models.client import Client
from ledger_admin.schemas.client_schema import ClientSchema
from ledger_admin.utils.auth import guarded, require_permission
from ledger_admin.utils.data_filter import filter_entities
from ledger_admin.utils.error_messages import ERROR_MESSAGES
from ledger_admin.utils.errors import ResourceNotFound
from ledger_admin.utils.helpers import dump, get_or_404, get_store, validate_request
from ledger_admin.utils.permissions import Action, Module
from ledger_admin.utils.response import success_response

logger = logging.getLogger(__name__)

clients_blueprint = Blueprint('clients', __name__)

# Clients are shared across centers, so none of these routes check scope.


@clients_blueprint.route('/client', methods=['POST'])
@jwt_required()
@guarded(require_permission(Module.CLIENTS, Action.CREATE))
def create_client(ctx):
    data = validate_request(ClientSchema())
    client = Client.create(get_store(), data)
    return success_response(dump(ClientSchema(), client), message="Client created successfully", status=201)


@clients_blueprint.route('/client', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.CLIENTS, Action.VIEW))
def list_clients(ctx):
    clients = filter_entities('clients', Client.find_all(get_store()), ctx.principal, ctx.permissions)
    return success_response(dump(ClientSchema(), clients), meta={'total': len(clients)})


@clients_blueprint.route('/client/<string:client_id>', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.CLIENTS, Action.VIEW))
def get_client(ctx, client_id: str):
    return success_response(dump(ClientSchema(), get_or_404(Client, client_id, "client")))


@clients_blueprint.route('/client/<string:client_id>', methods=['PATCH'])
@jwt_required()
@guarded(require_permission(Module.CLIENTS, Action.EDIT))
def update_client(ctx, client_id: str):
    client = get_or_404(Client, client_id, "client")
    data = validate_request(ClientSchema(), partial=True)
    updated = Client.update(get_store(), client.id, data)
    return success_response(dump(ClientSchema(), updated), message="Client updated successfully")


@clients_blueprint.route('/client/<string:client_id>', methods=['DELETE'])
@jwt_required()
@guarded(require_permission(Module.CLIENTS, Action.DELETE))
def delete_client(ctx, client_id: str):
    if not Client.delete(get_store(), client_id):
        raise ResourceNotFound(ERROR_MESSAGES["not_found"]["client"])
    return success_response({'id': client_id}, message="Client deleted successfully")


@clients_blueprint.route('/client', methods=['DELETE'])
@jwt_required()
@guarded(require_permission(Module.CLIENTS, Action.DELETE))
def delete_all_clients(ctx):
    deleted = Client.delete_all(get_store())
    logger.warning("All clients deleted by user=%s (%d removed)", ctx.user_id, deleted)
    return success_response({'deletedCount': deleted}, message="All clients deleted successfully")
