from marshmallow import fields, validate

from itts_community.schemas.common import BaseSchema, TimestampsSchema, not_blank, program_field


class RegistrationCreateSchema(BaseSchema):
    full_name = fields.String(required=True, validate=validate.Length(min=3, max=255))
    email = fields.Email(required=True)
    program = program_field(required=True)
    student_id = fields.String(required=True, validate=[validate.Length(max=64), not_blank])
    intake_year = fields.Integer(required=True, validate=validate.Range(min=2000, max=2100))
    motivation = fields.String(required=True, validate=validate.Length(min=10))


class RejectRegistrationSchema(BaseSchema):
    reason = fields.String(required=True, validate=validate.Length(min=5))


class RegistrationOutSchema(TimestampsSchema):
    id = fields.String()
    full_name = fields.String()
    email = fields.String()
    program = fields.String()
    student_id = fields.String()
    intake_year = fields.Integer()
    motivation = fields.String()
    status = fields.String()
    approved_by = fields.String(allow_none=True)
    approved_at = fields.DateTime(allow_none=True)
    rejected_reason = fields.String(allow_none=True)
    email_verified_at = fields.DateTime(allow_none=True)
