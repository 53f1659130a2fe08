from marshmallow import fields, validate

from itts_community.schemas.common import BaseSchema, TimestampsSchema, program_field


class RoadmapCreateSchema(BaseSchema):
    program = program_field(allow_none=True)
    month_number = fields.Integer(required=True, validate=validate.Range(min=1, max=12))
    title = fields.String(required=True, validate=validate.Length(min=3, max=255))
    description = fields.String(allow_none=True)
    sort_order = fields.Integer(load_default=0)
    is_active = fields.Boolean(load_default=True)


class RoadmapUpdateSchema(BaseSchema):
    program = program_field(allow_none=True)
    month_number = fields.Integer(validate=validate.Range(min=1, max=12))
    title = fields.String(validate=validate.Length(min=3, max=255))
    description = fields.String(allow_none=True)
    sort_order = fields.Integer()
    is_active = fields.Boolean()


class RoadmapItemCreateSchema(BaseSchema):
    roadmap_id = fields.String(required=True)
    item_text = fields.String(required=True, validate=validate.Length(min=1))
    sort_order = fields.Integer(load_default=0)


class RoadmapItemUpdateSchema(BaseSchema):
    item_text = fields.String(validate=validate.Length(min=1))
    sort_order = fields.Integer()


class RoadmapItemOutSchema(TimestampsSchema):
    id = fields.String()
    roadmap_id = fields.String()
    item_text = fields.String()
    sort_order = fields.Integer()


class RoadmapOutSchema(TimestampsSchema):
    id = fields.String()
    program = fields.String(allow_none=True)
    month_number = fields.Integer()
    title = fields.String()
    description = fields.String(allow_none=True)
    sort_order = fields.Integer()
    is_active = fields.Boolean()
    items = fields.List(fields.Nested(RoadmapItemOutSchema))
