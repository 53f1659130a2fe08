from marshmallow import ValidationError, fields, validate, validates_schema

from itts_community.models.event import EVENT_STATUSES
from itts_community.schemas.common import BaseSchema, TimestampsSchema, program_field
from itts_community.utils.timeutil import to_naive_utc

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class EventCreateSchema(BaseSchema):
    slug = fields.String(allow_none=True, validate=validate.Regexp(SLUG_PATTERN, error="Must be a lowercase-hyphenated slug."))
    title = fields.String(required=True, validate=validate.Length(min=3, max=255))
    summary = fields.String(allow_none=True)
    description = fields.String(allow_none=True)
    image_url = fields.String(allow_none=True, validate=validate.Length(max=1024))
    program = program_field(allow_none=True)
    status = fields.String(validate=validate.OneOf(EVENT_STATUSES))
    starts_at = fields.DateTime(required=True)
    ends_at = fields.DateTime(allow_none=True)
    venue = fields.String(allow_none=True, validate=validate.Length(max=255))

    @validates_schema
    def validate_window(self, data, **kwargs):
        starts_at = to_naive_utc(data.get("starts_at"))
        ends_at = to_naive_utc(data.get("ends_at"))
        if starts_at and ends_at and ends_at < starts_at:
            raise ValidationError("Must not be before starts_at.", "ends_at")


class EventUpdateSchema(EventCreateSchema):
    title = fields.String(validate=validate.Length(min=3, max=255))
    starts_at = fields.DateTime()


class EventStatusSchema(BaseSchema):
    status = fields.String(required=True, validate=validate.OneOf(EVENT_STATUSES))


class SpeakerCreateSchema(BaseSchema):
    name = fields.String(required=True, validate=validate.Length(min=2, max=255))
    title = fields.String(allow_none=True)
    avatar_url = fields.String(allow_none=True, validate=validate.Length(max=1024))
    sort_order = fields.Integer(load_default=0)


class SpeakerUpdateSchema(BaseSchema):
    name = fields.String(validate=validate.Length(min=2, max=255))
    title = fields.String(allow_none=True)
    avatar_url = fields.String(allow_none=True, validate=validate.Length(max=1024))
    sort_order = fields.Integer()


class EventRegisterSchema(BaseSchema):
    full_name = fields.String(required=True, validate=validate.Length(min=3, max=255))
    email = fields.Email(required=True)


class SpeakerOutSchema(BaseSchema):
    id = fields.String()
    event_id = fields.String()
    name = fields.String()
    title = fields.String(allow_none=True)
    avatar_url = fields.String(allow_none=True)
    sort_order = fields.Integer()


class EventOutSchema(TimestampsSchema):
    id = fields.String()
    slug = fields.String(allow_none=True)
    title = fields.String()
    summary = fields.String(allow_none=True)
    description = fields.String(allow_none=True)
    image_url = fields.String(allow_none=True)
    program = fields.String(allow_none=True)
    status = fields.String()
    starts_at = fields.DateTime()
    ends_at = fields.DateTime(allow_none=True)
    venue = fields.String(allow_none=True)
    speakers = fields.List(fields.Nested(SpeakerOutSchema))


class EventRegistrationOutSchema(BaseSchema):
    id = fields.String()
    event_id = fields.String()
    full_name = fields.String()
    email = fields.String()
    created_at = fields.DateTime()
