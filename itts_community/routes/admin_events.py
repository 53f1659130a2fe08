"""
Admin endpoints for events, their speakers and attendee registrations.
"""

from flask import Blueprint, request

from itts_community.schemas.event import (
    EventCreateSchema,
    EventOutSchema,
    EventRegistrationOutSchema,
    EventStatusSchema,
    EventUpdateSchema,
    SpeakerCreateSchema,
    SpeakerOutSchema,
    SpeakerUpdateSchema,
)
from itts_community.security.permissions import current_auth, require_permission
from itts_community.services.event_registration_service import EventRegistrationService
from itts_community.services.event_service import EventService, SpeakerService
from itts_community.utils.pagination import arg_datetime, arg_str, parse_list_params
from itts_community.utils.responses import created, no_content, ok, paginated
from itts_community.utils.validation import load_json

events_bp = Blueprint("admin_events", __name__, url_prefix="/api/v1/admin")

event_schema = EventOutSchema()
speaker_schema = SpeakerOutSchema()
event_registration_schema = EventRegistrationOutSchema()


def _actor_id():
    return current_auth().user_id


# ===== EVENTS =====

@events_bp.get("/events")
@require_permission("events:read")
def list_events():
    params = parse_list_params(request.args)
    params.filters = {
        "program": arg_str(request.args, "program"),
        "status": arg_str(request.args, "status"),
    }
    page = EventService.list_events(
        params,
        starts_from=arg_datetime(request.args, "from"),
        starts_to=arg_datetime(request.args, "to"),
    )
    return paginated(page, event_schema)


@events_bp.post("/events")
@require_permission("events:create")
def create_event():
    data = load_json(EventCreateSchema())
    return created(event_schema.dump(EventService.create(data, _actor_id())))


@events_bp.get("/events/<event_id>")
@require_permission("events:read")
def get_event(event_id):
    return ok(event_schema.dump(EventService.get(event_id)))


@events_bp.patch("/events/<event_id>")
@require_permission("events:update")
def update_event(event_id):
    data = load_json(EventUpdateSchema(), partial=True)
    return ok(event_schema.dump(EventService.update(event_id, data, _actor_id())))


@events_bp.patch("/events/<event_id>/status")
@require_permission("events:update")
def set_event_status(event_id):
    data = load_json(EventStatusSchema())
    return ok(event_schema.dump(EventService.set_status(event_id, data["status"], _actor_id())))


@events_bp.delete("/events/<event_id>")
@require_permission("events:delete")
def delete_event(event_id):
    EventService.delete(event_id, _actor_id())
    return no_content()


# ===== SPEAKERS =====

@events_bp.post("/events/<event_id>/speakers")
@require_permission("event_speakers:create")
def add_speaker(event_id):
    data = load_json(SpeakerCreateSchema())
    return created(speaker_schema.dump(SpeakerService.add(event_id, data)))


@events_bp.get("/event-speakers")
@require_permission("event_speakers:read")
def list_speakers():
    params = parse_list_params(request.args)
    params.filters = {"event_id": arg_str(request.args, "event_id")}
    return paginated(SpeakerService.list_speakers(params), speaker_schema)


@events_bp.get("/event-speakers/<speaker_id>")
@require_permission("event_speakers:read")
def get_speaker(speaker_id):
    return ok(speaker_schema.dump(SpeakerService.get(speaker_id)))


@events_bp.patch("/event-speakers/<speaker_id>")
@require_permission("event_speakers:update")
def update_speaker(speaker_id):
    data = load_json(SpeakerUpdateSchema(), partial=True)
    return ok(speaker_schema.dump(SpeakerService.update(speaker_id, data)))


@events_bp.delete("/event-speakers/<speaker_id>")
@require_permission("event_speakers:delete")
def delete_speaker(speaker_id):
    SpeakerService.delete(speaker_id)
    return no_content()


# ===== EVENT REGISTRATIONS =====

@events_bp.get("/event-registrations")
@require_permission("event_registrations:read")
def list_event_registrations():
    params = parse_list_params(request.args)
    email = arg_str(request.args, "email")
    params.filters = {
        "event_id": arg_str(request.args, "event_id"),
        "email": email.lower() if email else None,
    }
    return paginated(EventRegistrationService.list_registrations(params), event_registration_schema)


@events_bp.get("/event-registrations/<registration_id>")
@require_permission("event_registrations:read")
def get_event_registration(registration_id):
    return ok(event_registration_schema.dump(EventRegistrationService.get(registration_id)))


@events_bp.delete("/event-registrations/<registration_id>")
@require_permission("event_registrations:delete")
def delete_event_registration(registration_id):
    EventRegistrationService.delete(registration_id, _actor_id())
    return no_content()
