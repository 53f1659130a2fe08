import uuid

from itts_community.extensions import db
from itts_community.utils.timeutil import utcnow


class Mentor(db.Model):
    __tablename__ = "mentors"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name = db.Column(db.String(255), nullable=False)
    title = db.Column(db.String(255), nullable=True)
    bio = db.Column(db.Text, nullable=True)
    avatar_url = db.Column(db.String(1024), nullable=True)
    programs = db.Column(db.JSON, nullable=False, default=list)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    # Higher priority is listed first
    priority = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.Index("idx_mentors_active_priority", "is_active", "priority"),
    )
