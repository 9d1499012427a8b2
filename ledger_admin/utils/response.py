from flask import current_app
import json
from decimal import Decimal
from datetime import date, datetime

class CustomJSONEncoder(json.JSONEncoder):
    """
    Custom JSON encoder to handle special data types like Decimal and datetime.
    """
    def default(self, o):
        if isinstance(o, Decimal):
            # Whole numbers become int, everything else float
            if o == o.to_integral_value():
                return int(o)
            return float(o)
        if isinstance(o, (datetime, date)):
            return o.isoformat()
        if isinstance(o, (set, frozenset)):
            return sorted(o)
        return super().default(o)

def success_response(result=None, message="Success", meta=None, status=200):
    """
    Creates a standardized success JSON response using the custom encoder.
    """
    return (
        current_app.response_class(
            response=json.dumps(
                {
                    "success": True,
                    "message": message,
                    "data": {"results": result if result is not None else [], "meta": meta or {}},
                },
                cls=CustomJSONEncoder
            ),
            status=status,
            mimetype="application/json",
        ),
        status,
    )

def error_response(error_code="bad_request", message="An error occurred.", details=None, status=400):
    """
    Creates a standardized error JSON response.
    """
    return (
        current_app.response_class(
            response=json.dumps(
                {
                    "success": False,
                    "error": {
                        "code": error_code,
                        "message": message,
                        "details": details or {},
                    },
                },
                cls=CustomJSONEncoder
            ),
            status=status,
            mimetype="application/json",
        ),
        status,
    )
