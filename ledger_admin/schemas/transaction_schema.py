from marshmallow import EXCLUDE, Schema, fields, post_dump, pre_load, validate

from ledger_admin.schemas.fields import IsoDateTime

# Batch imports carry resolved names under these keys
ORIGINAL_NAME_FIELDS = {
    'originalClientName': 'clientName',
    'originalCenterName': 'centerName',
    'originalServiceName': 'serviceName',
}

DISPLAY_NAME_KEYS = ('clientDisplayName', 'centerDisplayName', 'serviceDisplayName')


class TransactionSchema(Schema):
    """Schema for validating and serializing ledger transactions."""
    id = fields.Str(dump_only=True)
    index = fields.Int(validate=validate.Range(min=0))
    date = IsoDateTime(required=True)
    center = fields.Str(required=True, validate=validate.Length(min=1))
    center_name = fields.Str(allow_none=True, data_key='centerName')
    client = fields.Str(required=True, validate=validate.Length(min=1))
    client_name = fields.Str(allow_none=True, data_key='clientName')
    cost = fields.Float(required=True)
    worker = fields.Str(required=True)
    taxes = fields.Float(required=True)
    type_of_transaction = fields.Str(required=True, data_key='typeOfTransaction')
    type_of_movement = fields.Str(required=True, data_key='typeOfMovement')
    frequency = fields.Str(required=True)
    type_of_client = fields.Str(required=True, data_key='typeOfClient')
    service = fields.Str(required=True, validate=validate.Length(min=1))
    service_name = fields.Str(allow_none=True, data_key='serviceName')

    client_display_name = fields.Str(dump_only=True, data_key='clientDisplayName')
    center_display_name = fields.Str(dump_only=True, data_key='centerDisplayName')
    service_display_name = fields.Str(dump_only=True, data_key='serviceDisplayName')
    created_at = fields.Str(dump_only=True, allow_none=True, data_key='createdAt')
    updated_at = fields.Str(dump_only=True, allow_none=True, data_key='updatedAt')

    class Meta:
        ordered = True
        unknown = EXCLUDE

    @post_dump
    def drop_missing_display_names(self, data, **kwargs):
        for key in DISPLAY_NAME_KEYS:
            if not data.get(key):
                data.pop(key, None)
        return data


class BatchTransactionSchema(TransactionSchema):
    """
    Rows coming from the import screen. The front-end keeps resolved names in
    `original*Name` keys and its own bookkeeping in underscore-prefixed keys.
    """

    @pre_load
    def map_import_fields(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        row = {}
        for key, value in data.items():
            if key in ORIGINAL_NAME_FIELDS:
                if value:
                    row[ORIGINAL_NAME_FIELDS[key]] = value
            elif key.startswith('_') or key == 'originalDateFormat':
                continue
            else:
                row.setdefault(key, value)
        return row
