from datetime import datetime, timezone
import logging
import traceback

from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from ledger_admin.config import Config
from ledger_admin.database.memory_store import MemoryDocumentStore
from ledger_admin.database.models.user import User
from ledger_admin.database.store import MySQLDocumentStore, StoreError
from ledger_admin.utils.error_messages import ERROR_MESSAGES
from ledger_admin.utils.errors import ApiError, InternalError
from ledger_admin.utils.helpers import STORE_EXTENSION
from ledger_admin.utils.response import error_response, success_response

# Import blueprints from their correct locations
from .routes.users import users_blueprint
from .routes.centers import centers_blueprint
from .routes.services import services_blueprint
from .routes.clients import clients_blueprint
from .routes.costs import costs_blueprint
from .routes.transactions import transactions_blueprint
from .routes.permissions import permissions_blueprint
from .routes.dashboard import dashboard_bp

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'X-XSS-Protection': '1; mode=block',
    'Strict-Transport-Security': 'max-age=31536000; includeSubDomains',
}


def build_store(backend):
    """Construct the document store named by STORE_BACKEND."""
    if backend == 'memory':
        return MemoryDocumentStore()
    if backend == 'mysql':
        return MySQLDocumentStore()
    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")


def create_app(config_overrides=None, store=None):
    app = Flask(__name__)

    # --- Configuration ---
    app.config.from_mapping(Config.as_dict())
    app.config.from_mapping(config_overrides or {})

    if store is None:
        store = build_store(app.config['STORE_BACKEND'])
        store.initialize()
    app.extensions[STORE_EXTENSION] = store

    # --- CORS Configuration ---
    CORS(app,
         resources={r"/*": {"origins": app.config['CORS_ORIGINS']}},
         supports_credentials=True,
         allow_headers=["Content-Type", "Authorization"],
         methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"])

    @app.after_request
    def add_security_headers(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    jwt = JWTManager(app)

    # --- JWT Custom Error Handlers ---
    def handle_invalid_token(error):
        return error_response(error_code='invalid_token', message=ERROR_MESSAGES["auth"]["invalid_token"], status=401)

    def handle_missing_token(error):
        return error_response(error_code='missing_token', message=ERROR_MESSAGES["auth"]["missing_token"], status=401)

    def handle_expired_token(jwt_header, jwt_payload):
        return error_response(error_code='token_expired', message=ERROR_MESSAGES["auth"]["token_expired"], status=401)

    def handle_user_lookup_error(jwt_header, jwt_data):
        # Either the user is gone or the token's session was logged out
        return error_response(error_code='token_revoked', message=ERROR_MESSAGES["auth"]["token_revoked"], status=401)

    # --- JWT User Claims ---
    def user_lookup_callback(_jwt_header, jwt_data):
        user = User.find_by_id(store, jwt_data["sub"])
        if user is None or not user.has_session(jwt_data.get("jti")):
            return None
        return user

    jwt.invalid_token_loader(handle_invalid_token)
    jwt.unauthorized_loader(handle_missing_token)
    jwt.expired_token_loader(handle_expired_token)
    jwt.user_lookup_error_loader(handle_user_lookup_error)
    jwt.user_lookup_loader(user_lookup_callback)

    # --- Error Handlers ---
    def debug_details(error):
        if Config.is_production(app.config):
            return {}
        trace = traceback.format_exception(type(error), error, error.__traceback__)
        return {'exception': repr(error), 'traceback': ''.join(trace)}

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return error.to_response()

    @app.errorhandler(StoreError)
    def handle_store_error(error):
        logger.exception("Store failure")
        return InternalError(ERROR_MESSAGES["server_error"]["store"], details=debug_details(error)).to_response()

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        code = (error.name or 'error').lower().replace(' ', '_')
        return error_response(error_code=code, message=error.description, status=error.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception("Unhandled error")
        return InternalError(details=debug_details(error)).to_response()

    # --- Register Blueprints ---
    app.register_blueprint(users_blueprint)
    app.register_blueprint(centers_blueprint)
    app.register_blueprint(services_blueprint)
    app.register_blueprint(clients_blueprint)
    app.register_blueprint(costs_blueprint)
    app.register_blueprint(transactions_blueprint)
    app.register_blueprint(permissions_blueprint)
    app.register_blueprint(dashboard_bp)

    # A simple health check route
    @app.route("/health")
    def health_check():
        store_ok = store.ping()
        return success_response(
            {
                "status": "running" if store_ok else "error",
                "store": "connected" if store_ok else "unreachable",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
            message="Project is up and running!" if store_ok else "Store connection failed",
            status=200 if store_ok else 503,
        )

    return app
