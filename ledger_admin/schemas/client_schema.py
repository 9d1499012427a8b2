from marshmallow import EXCLUDE, Schema, fields, validate

from ledger_admin.schemas.fields import IsoDateTime


class ClientSchema(Schema):
    """Schema for validating and serializing clients."""
    id = fields.Str(dump_only=True)
    first_name = fields.Str(required=True, data_key='firstName', validate=validate.Length(min=1))
    last_name = fields.Str(required=True, data_key='lastName', validate=validate.Length(min=1))
    email = fields.Str(required=True, validate=validate.Length(min=1))
    phone_number = fields.Str(allow_none=True, data_key='phoneNumber')
    secondary_phone_number = fields.Str(allow_none=True, data_key='secondaryPhoneNumber')
    gender = fields.Str(allow_none=True)
    birthdate = IsoDateTime(as_date=True, allow_none=True)
    zipcode = fields.Int(allow_none=True)
    city = fields.Str(allow_none=True)
    address = fields.Str(allow_none=True)
    created_at = fields.Str(dump_only=True, allow_none=True, data_key='createdAt')
    updated_at = fields.Str(dump_only=True, allow_none=True, data_key='updatedAt')

    class Meta:
        ordered = True
        unknown = EXCLUDE
