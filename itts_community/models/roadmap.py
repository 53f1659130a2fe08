import uuid

from itts_community.extensions import db
from itts_community.utils.timeutil import utcnow


class Roadmap(db.Model):
    __tablename__ = "roadmaps"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # NULL applies to every program
    program = db.Column(db.String(32), nullable=True)
    month_number = db.Column(db.Integer, nullable=False)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    items = db.relationship(
        "RoadmapItem",
        back_populates="roadmap",
        cascade="all, delete-orphan",
        order_by="RoadmapItem.sort_order",
        lazy="selectin",
    )

    __table_args__ = (
        db.CheckConstraint("month_number BETWEEN 1 AND 12", name="ck_roadmaps_month_number"),
    )


class RoadmapItem(db.Model):
    __tablename__ = "roadmap_items"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    roadmap_id = db.Column(db.String(36), db.ForeignKey("roadmaps.id", ondelete="CASCADE"), nullable=False, index=True)
    item_text = db.Column(db.Text, nullable=False)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    roadmap = db.relationship("Roadmap", back_populates="items")
