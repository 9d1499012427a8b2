from marshmallow import EXCLUDE, Schema, fields, validate


class CenterSchema(Schema):
    """Schema for validating and serializing centers."""
    id = fields.Str(dump_only=True)
    name = fields.Str(required=True, validate=validate.Length(min=1))
    created_at = fields.Str(dump_only=True, allow_none=True, data_key='createdAt')
    updated_at = fields.Str(dump_only=True, allow_none=True, data_key='updatedAt')

    class Meta:
        ordered = True
        unknown = EXCLUDE


class CostSchema(CenterSchema):
    """Cost categories carry the same shape as centers."""
