from marshmallow import fields, validate

from itts_community.schemas.common import BaseSchema, TimestampsSchema, program_field


class MentorCreateSchema(BaseSchema):
    full_name = fields.String(required=True, validate=validate.Length(min=3, max=255))
    title = fields.String(allow_none=True, validate=validate.Length(max=255))
    bio = fields.String(allow_none=True)
    avatar_url = fields.String(allow_none=True, validate=validate.Length(max=1024))
    programs = fields.List(program_field(), load_default=list)
    is_active = fields.Boolean(load_default=True)
    priority = fields.Integer(load_default=0, validate=validate.Range(min=0))


class MentorUpdateSchema(BaseSchema):
    full_name = fields.String(validate=validate.Length(min=3, max=255))
    title = fields.String(allow_none=True, validate=validate.Length(max=255))
    bio = fields.String(allow_none=True)
    avatar_url = fields.String(allow_none=True, validate=validate.Length(max=1024))
    programs = fields.List(program_field())
    is_active = fields.Boolean()
    priority = fields.Integer(validate=validate.Range(min=0))


class ActiveFlagSchema(BaseSchema):
    is_active = fields.Boolean(required=True)


class PrioritySchema(BaseSchema):
    priority = fields.Integer(required=True, validate=validate.Range(min=0))


class MentorOutSchema(TimestampsSchema):
    id = fields.String()
    full_name = fields.String()
    title = fields.String(allow_none=True)
    bio = fields.String(allow_none=True)
    avatar_url = fields.String(allow_none=True)
    programs = fields.List(fields.String())
    is_active = fields.Boolean()
    priority = fields.Integer()
