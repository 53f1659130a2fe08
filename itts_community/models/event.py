import uuid

from itts_community.extensions import db
from itts_community.utils.timeutil import utcnow

EVENT_DRAFT = "draft"
EVENT_OPEN = "open"
EVENT_ONGOING = "ongoing"
EVENT_CLOSED = "closed"
EVENT_STATUSES = (EVENT_DRAFT, EVENT_OPEN, EVENT_ONGOING, EVENT_CLOSED)


class Event(db.Model):
    __tablename__ = "events"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    slug = db.Column(db.String(255), unique=True, nullable=True)
    title = db.Column(db.String(255), nullable=False)
    summary = db.Column(db.Text, nullable=True)
    description = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(1024), nullable=True)
    program = db.Column(db.String(32), nullable=True)
    status = db.Column(db.String(16), nullable=False, default=EVENT_DRAFT, index=True)
    starts_at = db.Column(db.DateTime, nullable=False, index=True)
    ends_at = db.Column(db.DateTime, nullable=True)
    venue = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    speakers = db.relationship(
        "EventSpeaker",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventSpeaker.sort_order",
        lazy="selectin",
    )
    registrations = db.relationship("EventRegistration", back_populates="event", cascade="all, delete-orphan")


class EventSpeaker(db.Model):
    __tablename__ = "event_speakers"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = db.Column(db.String(36), db.ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    title = db.Column(db.String(255), nullable=True)
    avatar_url = db.Column(db.String(1024), nullable=True)
    sort_order = db.Column(db.Integer, nullable=False, default=0)

    event = db.relationship("Event", back_populates="speakers")


class EventRegistration(db.Model):
    __tablename__ = "event_registrations"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = db.Column(db.String(36), db.ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    event = db.relationship("Event", back_populates="registrations")

    __table_args__ = (
        db.UniqueConstraint("event_id", "email", name="uq_event_registrations_event_email"),
    )
