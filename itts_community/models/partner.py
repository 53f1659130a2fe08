import uuid

from itts_community.extensions import db
from itts_community.utils.timeutil import utcnow

PARTNER_KINDS = ("lab", "partner_academic", "partner_industry")


class Partner(db.Model):
    __tablename__ = "partners"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False)
    kind = db.Column(db.String(32), nullable=False, index=True)
    subtitle = db.Column(db.String(255), nullable=True)
    description = db.Column(db.Text, nullable=True)
    logo_url = db.Column(db.String(1024), nullable=True)
    website_url = db.Column(db.String(1024), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    priority = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
