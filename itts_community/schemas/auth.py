from marshmallow import fields, validate

from itts_community.schemas.common import BaseSchema, password_field


class LoginSchema(BaseSchema):
    email = fields.Email(required=True)
    password = password_field(6, required=True)


class RefreshTokenSchema(BaseSchema):
    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class ChangePasswordSchema(BaseSchema):
    old_password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))
    new_password = password_field(8, required=True)


class UpdateProfileSchema(BaseSchema):
    email = fields.Email()
    full_name = fields.String(allow_none=True, validate=validate.Length(max=255))
