# Centralized user-facing error messages.

ERROR_MESSAGES = {
    "auth": {
        "authentication_required": "Authentication required.",
        "invalid_credentials": "Invalid email or password.",
        "invalid_token": "Invalid or expired authentication token.",
        "missing_token": "Authorization token is missing.",
        "token_expired": "Token has expired. Please sign in again.",
        "token_revoked": "Token has been revoked. Please sign in again.",
    },
    "forbidden": {
        "permission": "Access denied. You don't have permission to {action} {module}.",
        "admin": "Access denied. Admin role required.",
        "super_admin": "Access denied. Super admin role required.",
        "center": "Access denied. You don't have permission to access this center.",
        "service": "Access denied. You don't have permission to access this service.",
        "self_promotion": "You cannot grant yourself the super_admin role.",
        "grant_super_admin": "Only a super admin can grant the super_admin role.",
        "modify_super_admin": "Only a super admin can modify a super admin account.",
        "self_delete": "A super admin cannot delete their own account.",
    },
    "validation": {
        "invalid_data": "Invalid data provided.",
        "request_body_empty": "Request body cannot be empty.",
        "missing_credentials": "Email and password are required.",
        "center_required": "Center reference is required.",
        "service_required": "Service reference is required.",
        "transactions_list": "Expected an array of transactions.",
        "old_password_required": "Old password is required to set a new password.",
        "invalid_old_password": "Current password is incorrect.",
        "unknown_reference": "Unknown {kind}: {ref}.",
    },
    "not_found": {
        "user": "User not found.",
        "center": "Center not found.",
        "service": "Service not found.",
        "client": "Client not found.",
        "costs": "Costs not found.",
        "transaction": "Transaction not found.",
    },
    "conflict": {
        "user_exists": "Email is already in use.",
    },
    "server_error": {
        "generic": "Internal server error.",
        "store": "A storage error occurred while processing the request.",
    },
}
