import logging

from itts_community.errors import Conflict, NotFound, ValidationFailed
from itts_community.extensions import db
from itts_community.models.event import EVENT_DRAFT, Event, EventSpeaker
from itts_community.services.audit_service import AuditService
from itts_community.utils.pagination import list_query
from itts_community.utils.redis_lock import redis_lock
from itts_community.utils.timeutil import to_naive_utc

logger = logging.getLogger(__name__)

EVENT_LOCK_TTL = 10
SPEAKER_LOCK_TTL = 5

SORT_FIELDS = {
    "starts_at": Event.starts_at,
    "title": Event.title,
    "created_at": Event.created_at,
    "status": Event.status,
}


def _assign(obj, data):
    for key, value in data.items():
        if key in ("starts_at", "ends_at"):
            value = to_naive_utc(value)
        setattr(obj, key, value)


def _ensure_slug_free(slug, event_id=None):
    if not slug:
        return
    query = Event.query.filter(Event.slug == slug)
    if event_id is not None:
        query = query.filter(Event.id != event_id)
    if query.first():
        raise Conflict("Slug already in use")


class EventService:

    @staticmethod
    def get(event_id):
        event = db.session.get(Event, event_id)
        if event is None:
            raise NotFound("event", event_id)
        return event

    @staticmethod
    def get_by_slug(slug):
        event = Event.query.filter_by(slug=slug).first()
        if event is None:
            raise NotFound("event", slug)
        return event

    @staticmethod
    def list_events(params, starts_from=None, starts_to=None):
        query = Event.query
        if starts_from is not None:
            query = query.filter(Event.starts_at >= starts_from)
        if starts_to is not None:
            query = query.filter(Event.starts_at <= starts_to)
        return list_query(
            query,
            Event,
            params,
            search_columns=(Event.title, Event.summary, Event.venue),
            sort_fields=SORT_FIELDS,
            default_sort=(Event.starts_at.desc(),),
        )

    @staticmethod
    def create(data, actor_id):
        with redis_lock("lock:events:create", EVENT_LOCK_TTL):
            _ensure_slug_free(data.get("slug"))
            event = Event(status=EVENT_DRAFT)
            _assign(event, data)
            db.session.add(event)
            db.session.flush()
            AuditService.record("event.create", user_id=actor_id, resource_type="event", resource_id=event.id)
            db.session.commit()
        logger.info("Event created", extra={"event_id": event.id})
        return event

    @staticmethod
    def update(event_id, data, actor_id):
        with redis_lock(f"lock:events:{event_id}", EVENT_LOCK_TTL):
            event = EventService.get(event_id)
            if "slug" in data:
                _ensure_slug_free(data["slug"], event.id)
            _assign(event, data)
            if event.ends_at and event.ends_at < event.starts_at:
                db.session.rollback()
                raise ValidationFailed({"ends_at": ["Must not be before starts_at."]})
            AuditService.record("event.update", user_id=actor_id, resource_type="event", resource_id=event.id,
                                metadata={"fields": sorted(data.keys())})
            db.session.commit()
        return event

    @staticmethod
    def set_status(event_id, status, actor_id):
        with redis_lock(f"lock:events:{event_id}", EVENT_LOCK_TTL):
            event = EventService.get(event_id)
            previous = event.status
            event.status = status
            AuditService.record("event.status", user_id=actor_id, resource_type="event", resource_id=event.id,
                                metadata={"from": previous, "to": status})
            db.session.commit()
        return event

    @staticmethod
    def delete(event_id, actor_id):
        with redis_lock(f"lock:events:{event_id}", EVENT_LOCK_TTL):
            event = EventService.get(event_id)
            db.session.delete(event)
            AuditService.record("event.delete", user_id=actor_id, resource_type="event", resource_id=event_id)
            db.session.commit()


class SpeakerService:

    @staticmethod
    def get(speaker_id):
        speaker = db.session.get(EventSpeaker, speaker_id)
        if speaker is None:
            raise NotFound("event_speaker", speaker_id)
        return speaker

    @staticmethod
    def list_speakers(params):
        return list_query(
            EventSpeaker.query,
            EventSpeaker,
            params,
            search_columns=(EventSpeaker.name, EventSpeaker.title),
            sort_fields={"sort_order": EventSpeaker.sort_order, "name": EventSpeaker.name},
            default_sort=(EventSpeaker.event_id.asc(), EventSpeaker.sort_order.asc()),
        )

    @staticmethod
    def add(event_id, data):
        EventService.get(event_id)
        # speaker ids own lock:event_speakers:*; adding serializes on the parent event
        with redis_lock(f"lock:events:{event_id}", SPEAKER_LOCK_TTL):
            speaker = EventSpeaker(event_id=event_id)
            _assign(speaker, data)
            db.session.add(speaker)
            db.session.commit()
        return speaker

    @staticmethod
    def update(speaker_id, data):
        with redis_lock(f"lock:event_speakers:{speaker_id}", SPEAKER_LOCK_TTL):
            speaker = SpeakerService.get(speaker_id)
            _assign(speaker, data)
            db.session.commit()
        return speaker

    @staticmethod
    def delete(speaker_id):
        with redis_lock(f"lock:event_speakers:{speaker_id}", SPEAKER_LOCK_TTL):
            speaker = SpeakerService.get(speaker_id)
            db.session.delete(speaker)
            db.session.commit()

