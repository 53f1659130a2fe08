from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate

from itts_community.models.registration import PROGRAMS

MAX_PASSWORD_BYTES = 72


class BaseSchema(Schema):
    class Meta:
        unknown = EXCLUDE


def not_blank(value):
    if not value or not value.strip():
        raise ValidationError("Must not be blank.")


def password_field(min_length, **kwargs):
    def bcrypt_limit(value):
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Must be at most {MAX_PASSWORD_BYTES} bytes.")

    return fields.String(
        load_only=True,
        validate=[validate.Length(min=min_length), bcrypt_limit],
        **kwargs,
    )


def program_field(**kwargs):
    return fields.String(validate=validate.OneOf(PROGRAMS), **kwargs)


class TimestampsSchema(BaseSchema):
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)
