from marshmallow import EXCLUDE, Schema, fields, validate

from ledger_admin.utils.permissions import AVAILABLE_ROLES

PASSWORD_LENGTH = validate.Length(min=4, max=80)


class UserSchema(Schema):
    """Outward representation of a user. Hashes and session ids are never included."""
    id = fields.Str(dump_only=True)
    email = fields.Email()
    first_name = fields.Str(data_key='firstName')
    last_name = fields.Str(data_key='lastName')
    percentage = fields.Float()
    role = fields.Str()
    permissions = fields.Dict()
    assigned_centers = fields.List(fields.Str(), data_key='assignedCenters')
    assigned_services = fields.List(fields.Str(), data_key='assignedServices')
    created_at = fields.Str(dump_only=True, allow_none=True, data_key='createdAt')
    updated_at = fields.Str(dump_only=True, allow_none=True, data_key='updatedAt')

    class Meta:
        ordered = True


class _ScopeFieldsMixin(Schema):
    # Raw on purpose: malformed entries are dropped later instead of failing the request
    permissions = fields.Raw(allow_none=True)
    assigned_centers = fields.Raw(allow_none=True, data_key='assignedCenters')
    assigned_services = fields.Raw(allow_none=True, data_key='assignedServices')


class UserCreateSchema(_ScopeFieldsMixin):
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True, validate=PASSWORD_LENGTH)
    first_name = fields.Str(required=True, data_key='firstName', validate=validate.Length(min=1))
    last_name = fields.Str(required=True, data_key='lastName', validate=validate.Length(min=1))
    percentage = fields.Float(load_default=0)
    role = fields.Str(validate=validate.OneOf(AVAILABLE_ROLES))

    class Meta:
        unknown = EXCLUDE


class UserUpdateSchema(_ScopeFieldsMixin):
    """Admin-side update of another user (all fields optional)."""
    email = fields.Email()
    password = fields.Str(load_only=True, validate=PASSWORD_LENGTH)
    first_name = fields.Str(data_key='firstName', validate=validate.Length(min=1))
    last_name = fields.Str(data_key='lastName', validate=validate.Length(min=1))
    percentage = fields.Float()
    role = fields.Str(validate=validate.OneOf(AVAILABLE_ROLES))

    class Meta:
        unknown = EXCLUDE


class UserPermissionsSchema(_ScopeFieldsMixin):
    """Role, overrides and scope only."""
    role = fields.Str(validate=validate.OneOf(AVAILABLE_ROLES))

    class Meta:
        unknown = EXCLUDE


class ProfileUpdateSchema(Schema):
    """Self-service profile update. Role, permissions and scope are not accepted here."""
    first_name = fields.Str(data_key='firstName', validate=validate.Length(min=1))
    last_name = fields.Str(data_key='lastName', validate=validate.Length(min=1))
    password = fields.Str(load_only=True, validate=PASSWORD_LENGTH)
    old_password = fields.Str(load_only=True, data_key='oldPassword')

    class Meta:
        unknown = EXCLUDE


class LoginSchema(Schema):
    email = fields.Str(required=True, validate=validate.Length(min=1))
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=1))

    class Meta:
        unknown = EXCLUDE
