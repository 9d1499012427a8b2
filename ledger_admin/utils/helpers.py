from typing import Any, Dict, Optional, Type

from flask import current_app, request
from marshmallow import Schema, ValidationError

from ledger_admin.utils.error_messages import ERROR_MESSAGES
from ledger_admin.utils.errors import ResourceNotFound, ValidationFailed

STORE_EXTENSION = 'document_store'


def get_store():
    """The document store injected into the running app."""
    return current_app.extensions[STORE_EXTENSION]


def validate_request(schema: Schema, data: Optional[Any] = None, partial: bool = False,
                     message: Optional[str] = None) -> Any:
    """
    Validate request data against a marshmallow schema.
    If data is not provided, it is read from the JSON body.
    Raises ValidationFailed with marshmallow's field messages as details.
    """
    if data is None:
        data = request.get_json(silent=True)

    expected = list if schema.many else dict
    if not isinstance(data, expected):
        raise ValidationFailed(message or ERROR_MESSAGES["validation"]["request_body_empty"])

    try:
        return schema.load(data, partial=partial)
    except ValidationError as err:
        raise ValidationFailed(message or ERROR_MESSAGES["validation"]["invalid_data"], details=err.messages)


def get_or_404(model: Type, record_id: str, resource_name: str):
    """Fetch a record by id or raise ResourceNotFound."""
    record = model.find_by_id(get_store(), record_id)
    if not record:
        raise ResourceNotFound(ERROR_MESSAGES["not_found"][resource_name])
    return record


def dump(schema: Schema, records) -> Any:
    """Serialize model instances (or lists of them) through a schema."""
    if isinstance(records, list):
        return schema.dump([r.to_dict() for r in records], many=True)
    return schema.dump(records.to_dict())
