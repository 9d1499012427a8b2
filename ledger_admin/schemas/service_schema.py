from marshmallow import EXCLUDE, Schema, fields, validate


class ServiceSchema(Schema):
    """Schema for validating and serializing services."""
    id = fields.Str(dump_only=True)
    name = fields.Str(required=True, validate=validate.Length(min=1))
    cost = fields.Float(load_default=0)
    tax = fields.Float(load_default=0)
    created_at = fields.Str(dump_only=True, allow_none=True, data_key='createdAt')
    updated_at = fields.Str(dump_only=True, allow_none=True, data_key='updatedAt')

    class Meta:
        ordered = True
        unknown = EXCLUDE
