import logging

from itts_community.errors import Conflict, NotFound, UnprocessableEntity
from itts_community.extensions import db
from itts_community.models.event import EVENT_CLOSED, EVENT_DRAFT, Event, EventRegistration
from itts_community.services.audit_service import AuditService
from itts_community.services.auth_service import normalize_email
from itts_community.utils.pagination import list_query
from itts_community.utils.redis_lock import redis_lock

logger = logging.getLogger(__name__)

LOCK_TTL = 10
CLOSED_STATUSES = (EVENT_DRAFT, EVENT_CLOSED)


class EventRegistrationService:

    @staticmethod
    def register(event_id, data):
        """Public sign-up for an event; one registration per e-mail."""
        email = normalize_email(data["email"])

        with redis_lock(f"lock:event_reg:{event_id}:{email}", LOCK_TTL):
            event = db.session.get(Event, event_id)
            if event is None:
                raise NotFound("event", event_id)
            if event.status in CLOSED_STATUSES:
                raise UnprocessableEntity("Event is not open for registration", {"status": event.status})

            exists = EventRegistration.query.filter_by(event_id=event.id, email=email).first()
            if exists:
                raise Conflict("Already registered for this event")

            registration = EventRegistration(
                event_id=event.id,
                full_name=data["full_name"].strip(),
                email=email,
            )
            db.session.add(registration)
            db.session.commit()

        logger.info("Event registration created", extra={"event_id": event_id, "registration_id": registration.id})
        return registration

    @staticmethod
    def get(registration_id):
        registration = db.session.get(EventRegistration, registration_id)
        if registration is None:
            raise NotFound("event_registration", registration_id)
        return registration

    @staticmethod
    def list_registrations(params):
        return list_query(
            EventRegistration.query,
            EventRegistration,
            params,
            search_columns=(EventRegistration.full_name, EventRegistration.email),
            sort_fields={"created_at": EventRegistration.created_at, "email": EventRegistration.email},
            default_sort=(EventRegistration.created_at.desc(),),
        )

    @staticmethod
    def delete(registration_id, actor_id):
        registration = EventRegistrationService.get(registration_id)
        db.session.delete(registration)
        AuditService.record("event_registration.delete", user_id=actor_id, resource_type="event_registration",
                            resource_id=registration_id, metadata={"event_id": registration.event_id})
        db.session.commit()
