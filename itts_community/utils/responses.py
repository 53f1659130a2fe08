from flask import g, jsonify

from itts_community.utils.timeutil import utcnow


def response_meta():
    return {
        "request_id": g.get("request_id"),
        "timestamp": utcnow().isoformat() + "Z",
    }


def ok(data, status=200):
    return jsonify({"data": data, "meta": response_meta()}), status


def created(data):
    return ok(data, status=201)


def no_content():
    return "", 204


def paginated(page, schema):
    """Render a :class:`Page` through a marshmallow ``schema``."""
    return jsonify({
        "data": schema.dump(page.items, many=True),
        "total": page.total,
        "page": page.page,
        "page_size": page.page_size,
        "total_pages": page.total_pages,
        "meta": response_meta(),
    }), 200
