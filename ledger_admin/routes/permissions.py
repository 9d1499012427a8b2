from flask import Blueprint
from flask_jwt_extended import jwt_required

from ledger_admin.utils.auth import guarded
from ledger_admin.utils.permissions import permission_catalogue
from ledger_admin.utils.response import success_response

permissions_blueprint = Blueprint('permissions', __name__)


# ---------------- List All Permissions ----------------
@permissions_blueprint.route('/permissions', methods=['GET'])
@jwt_required()
@guarded()
def list_permissions(ctx):
    """
    Roles, the actions available per module and each role's default matrix.
    Used by the user management screen to render the permission grid.
    """
    return success_response(permission_catalogue(), message="Permissions retrieved successfully.")
