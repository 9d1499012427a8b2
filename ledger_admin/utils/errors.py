"""
Error taxonomy for the API.

Every error raised by a guard, a handler or the store ends up as one of these,
rendered through `error_response` so clients always receive the same envelope.
"""
from typing import Any, Dict, Optional

from ledger_admin.utils.error_messages import ERROR_MESSAGES
from ledger_admin.utils.response import error_response


class ApiError(Exception):
    status = 400
    code = "bad_request"
    default_message = "An error occurred."

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self):
        return error_response(
            error_code=self.code,
            message=self.message,
            details=self.details,
            status=self.status,
        )


class AuthenticationRequired(ApiError):
    status = 401
    code = "authentication_required"
    default_message = ERROR_MESSAGES["auth"]["authentication_required"]


class AuthorizationDenied(ApiError):
    status = 403
    code = "forbidden"
    default_message = "Access denied."


class ResourceNotFound(ApiError):
    status = 404
    code = "not_found"
    default_message = "Resource not found."


class ValidationFailed(ApiError):
    status = 400
    code = "validation_error"
    default_message = ERROR_MESSAGES["validation"]["invalid_data"]


class ConflictError(ApiError):
    status = 409
    code = "conflict"
    default_message = "Resource already exists."


class InternalError(ApiError):
    status = 500
    code = "server_error"
    default_message = ERROR_MESSAGES["server_error"]["generic"]
