from marshmallow import fields, validate

from itts_community.schemas.common import BaseSchema, TimestampsSchema, password_field
from itts_community.schemas.rbac import RoleBriefSchema


class UserOutSchema(TimestampsSchema):
    id = fields.String()
    email = fields.String()
    full_name = fields.String(allow_none=True)
    is_active = fields.Boolean()
    is_super_admin = fields.Boolean()
    last_login_at = fields.DateTime(allow_none=True)
    has_password = fields.Boolean()
    roles = fields.List(fields.Nested(RoleBriefSchema))


class UserCreateSchema(BaseSchema):
    email = fields.Email(required=True)
    password = password_field(8, required=True)
    full_name = fields.String(allow_none=True, validate=validate.Length(max=255))
    is_active = fields.Boolean(load_default=True)
    is_super_admin = fields.Boolean(load_default=False)
    role_ids = fields.List(fields.String(), load_default=list)


class UserUpdateSchema(BaseSchema):
    email = fields.Email()
    full_name = fields.String(allow_none=True, validate=validate.Length(max=255))
    is_active = fields.Boolean()
    is_super_admin = fields.Boolean()
    # When present the user's role set is replaced
    role_ids = fields.List(fields.String())


class ResetPasswordSchema(BaseSchema):
    new_password = password_field(8, required=True)


class AssignRolesSchema(BaseSchema):
    role_ids = fields.List(fields.String(), required=True, validate=validate.Length(min=1))
    expires_at = fields.DateTime(allow_none=True)


class RemoveRolesSchema(BaseSchema):
    role_ids = fields.List(fields.String(), required=True, validate=validate.Length(min=1))
