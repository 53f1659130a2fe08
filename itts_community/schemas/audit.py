from marshmallow import fields

from itts_community.schemas.common import BaseSchema


class AuditLogOutSchema(BaseSchema):
    id = fields.String()
    user_id = fields.String(allow_none=True)
    action = fields.String()
    resource_type = fields.String(allow_none=True)
    resource_id = fields.String(allow_none=True)
    metadata = fields.Raw(attribute="details", allow_none=True)
    ip_address = fields.String(allow_none=True)
    user_agent = fields.String(allow_none=True)
    created_at = fields.DateTime()
