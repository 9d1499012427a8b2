from flask import Blueprint
from flask_jwt_extended import jwt_required

from ledger_admin.database.models.cost import Cost
from ledger_admin.schemas.center_schema import CostSchema
from ledger_admin.utils.auth import guarded, require_permission
from ledger_admin.utils.data_filter import filter_entities
from ledger_admin.utils.error_messages import ERROR_MESSAGES
from ledger_admin.utils.errors import ResourceNotFound
from ledger_admin.utils.helpers import dump, get_or_404, get_store, validate_request
from ledger_admin.utils.permissions import Action, Module
from ledger_admin.utils.response import success_response

costs_blueprint = Blueprint('costs', __name__)


@costs_blueprint.route('/costs', methods=['POST'])
@jwt_required()
@guarded(require_permission(Module.COSTS, Action.CREATE))
def create_cost(ctx):
    data = validate_request(CostSchema())
    cost = Cost.create(get_store(), data)
    return success_response(dump(CostSchema(), cost), message="Costs created successfully", status=201)


@costs_blueprint.route('/costs', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.COSTS, Action.VIEW))
def list_costs(ctx):
    costs = filter_entities('costs', Cost.find_all(get_store()), ctx.principal, ctx.permissions)
    return success_response(dump(CostSchema(), costs), meta={'total': len(costs)})


@costs_blueprint.route('/costs/<string:cost_id>', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.COSTS, Action.VIEW))
def get_cost(ctx, cost_id: str):
    return success_response(dump(CostSchema(), get_or_404(Cost, cost_id, "costs")))


@costs_blueprint.route('/costs/<string:cost_id>', methods=['PATCH'])
@jwt_required()
@guarded(require_permission(Module.COSTS, Action.EDIT))
def update_cost(ctx, cost_id: str):
    cost = get_or_404(Cost, cost_id, "costs")
    data = validate_request(CostSchema(), partial=True)
    updated = Cost.update(get_store(), cost.id, data)
    return success_response(dump(CostSchema(), updated), message="Costs updated successfully")


@costs_blueprint.route('/costs/<string:cost_id>', methods=['DELETE'])
@jwt_required()
@guarded(require_permission(Module.COSTS, Action.DELETE))
def delete_cost(ctx, cost_id: str):
    if not Cost.delete(get_store(), cost_id):
        raise ResourceNotFound(ERROR_MESSAGES["not_found"]["costs"])
    return success_response({'id': cost_id}, message="Costs deleted successfully")
