from flask import Blueprint
from flask_jwt_extended import jwt_required

from ledger_admin.database.models.center import Center
from ledger_admin.database.models.client import Client
from ledger_admin.database.models.cost import Cost
from ledger_admin.database.models.service import Service
from ledger_admin.database.models.transaction import Transaction
from ledger_admin.utils.auth import guarded, require_permission
from ledger_admin.utils.data_filter import filter_entities
from ledger_admin.utils.helpers import get_store
from ledger_admin.utils.permissions import Action, Module
from ledger_admin.utils.response import success_response

dashboard_bp = Blueprint('dashboard', __name__)

# (key in the response, module gating it, model)
DASHBOARD_SECTIONS = (
    ('transactions', Module.TRANSACTIONS, Transaction),
    ('clients', Module.CLIENTS, Client),
    ('centers', Module.CENTERS, Center),
    ('services', Module.SERVICES, Service),
    ('costs', Module.COSTS, Cost),
)


@dashboard_bp.route('/dashboard', methods=['GET'])
@jwt_required()
@guarded(require_permission(Module.DASHBOARD, Action.VIEW))
def get_dashboard(ctx):
    """
    Counts of the records the current user can see. Modules the user may not
    view are left out rather than reported as zero.
    """
    store = get_store()
    counts = {}
    totals = {}
    for key, module, model in DASHBOARD_SECTIONS:
        if not ctx.can(module, Action.VIEW):
            continue
        visible = filter_entities(key, model.find_all(store), ctx.principal, ctx.permissions)
        counts[key] = len(visible)
        if key == 'transactions':
            totals['cost'] = round(sum(float(getattr(t, 'cost', 0) or 0) for t in visible), 2)
            totals['taxes'] = round(sum(float(getattr(t, 'taxes', 0) or 0) for t in visible), 2)

    return success_response({'counts': counts, 'totals': totals}, message="Dashboard data retrieved successfully")
