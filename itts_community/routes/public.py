from flask import Blueprint, request

from itts_community.schemas.event import EventOutSchema, EventRegisterSchema, EventRegistrationOutSchema
from itts_community.schemas.registration import RegistrationCreateSchema, RegistrationOutSchema
from itts_community.services.event_registration_service import EventRegistrationService
from itts_community.services.event_service import EventService
from itts_community.services.registration_service import RegistrationService
from itts_community.utils.responses import created, ok
from itts_community.utils.validation import load_json

public_bp = Blueprint("public", __name__, url_prefix="/api/v1")


@public_bp.post("/registrations")
def register():
    """
    Member sign-up. The registration stays pending until the e-mail link
    is followed and an admin approves it.
    """
    data = load_json(RegistrationCreateSchema())
    registration = RegistrationService.register(data)
    return created(RegistrationOutSchema().dump(registration))


@public_bp.get("/registrations/verify-email")
def verify_email():
    registration = RegistrationService.verify_email(request.args.get("token", "").strip())
    return ok({"id": registration.id, "email_verified_at": registration.email_verified_at.isoformat() + "Z"})


@public_bp.get("/events/<slug>")
def get_event_by_slug(slug):
    return ok(EventOutSchema().dump(EventService.get_by_slug(slug)))


@public_bp.post("/events/<event_id>/registrations")
def register_for_event(event_id):
    data = load_json(EventRegisterSchema())
    registration = EventRegistrationService.register(event_id, data)
    return created(EventRegistrationOutSchema().dump(registration))
