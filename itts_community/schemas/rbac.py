from marshmallow import fields, validate

from itts_community.schemas.common import BaseSchema, TimestampsSchema


class RoleCreateSchema(BaseSchema):
    name = fields.String(required=True, validate=validate.Length(min=3, max=100))
    description = fields.String(allow_none=True)
    parent_role_id = fields.String(allow_none=True)
    permission_ids = fields.List(fields.String(), load_default=list)


class RoleUpdateSchema(BaseSchema):
    name = fields.String(validate=validate.Length(min=3, max=100))
    description = fields.String(allow_none=True)
    parent_role_id = fields.String(allow_none=True)


class RolePermissionsSchema(BaseSchema):
    permission_ids = fields.List(fields.String(), required=True, validate=validate.Length(min=1))


class ResourceOutSchema(TimestampsSchema):
    id = fields.String()
    name = fields.String()
    description = fields.String(allow_none=True)


class ActionOutSchema(TimestampsSchema):
    id = fields.String()
    name = fields.String()
    description = fields.String(allow_none=True)


class PermissionOutSchema(TimestampsSchema):
    id = fields.String()
    name = fields.String()
    description = fields.String(allow_none=True)
    resource_id = fields.String()
    action_id = fields.String()
    resource = fields.Function(lambda p: p.resource.name if p.resource else None)
    action = fields.Function(lambda p: p.action.name if p.action else None)


class RoleBriefSchema(BaseSchema):
    id = fields.String()
    name = fields.String()


class RoleOutSchema(TimestampsSchema):
    id = fields.String()
    name = fields.String()
    description = fields.String(allow_none=True)
    is_system = fields.Boolean()
    parent_role_id = fields.String(allow_none=True)
    permissions = fields.List(fields.Nested(PermissionOutSchema))
