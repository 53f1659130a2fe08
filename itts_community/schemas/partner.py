from marshmallow import fields, validate

from itts_community.models.partner import PARTNER_KINDS
from itts_community.schemas.common import BaseSchema, TimestampsSchema


class PartnerCreateSchema(BaseSchema):
    name = fields.String(required=True, validate=validate.Length(min=2, max=255))
    kind = fields.String(required=True, validate=validate.OneOf(PARTNER_KINDS))
    subtitle = fields.String(allow_none=True, validate=validate.Length(max=255))
    description = fields.String(allow_none=True)
    logo_url = fields.String(allow_none=True, validate=validate.Length(max=1024))
    website_url = fields.String(allow_none=True, validate=validate.Length(max=1024))
    is_active = fields.Boolean(load_default=True)
    priority = fields.Integer(load_default=0, validate=validate.Range(min=0))


class PartnerUpdateSchema(BaseSchema):
    name = fields.String(validate=validate.Length(min=2, max=255))
    kind = fields.String(validate=validate.OneOf(PARTNER_KINDS))
    subtitle = fields.String(allow_none=True, validate=validate.Length(max=255))
    description = fields.String(allow_none=True)
    logo_url = fields.String(allow_none=True, validate=validate.Length(max=1024))
    website_url = fields.String(allow_none=True, validate=validate.Length(max=1024))
    is_active = fields.Boolean()
    priority = fields.Integer(validate=validate.Range(min=0))


class PartnerOutSchema(TimestampsSchema):
    id = fields.String()
    name = fields.String()
    kind = fields.String()
    subtitle = fields.String(allow_none=True)
    description = fields.String(allow_none=True)
    logo_url = fields.String(allow_none=True)
    website_url = fields.String(allow_none=True)
    is_active = fields.Boolean()
    priority = fields.Integer()
