from flask import request
from marshmallow import ValidationError

from itts_community.errors import BadRequest, ValidationFailed


def load_json(schema, partial=False):
    """
    Parse the request body with ``schema``.

    Raises BadRequest for a missing/non-object body and ValidationFailed with
    every failing field (not just the first) otherwise.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise BadRequest("Request body must be a JSON object")
    try:
        return schema.load(payload, partial=partial)
    except ValidationError as err:
        raise ValidationFailed(err.normalized_messages()) from None
