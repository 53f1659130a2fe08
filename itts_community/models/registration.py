import uuid

from itts_community.extensions import db
from itts_community.utils.timeutil import utcnow

PROGRAMS = ("networking", "devsecops", "programming")

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
REGISTRATION_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)


class Registration(db.Model):
    __tablename__ = "registrations"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    program = db.Column(db.String(32), nullable=False)
    student_id = db.Column(db.String(64), nullable=False)
    intake_year = db.Column(db.Integer, nullable=False)
    motivation = db.Column(db.Text, nullable=False)

    # ========== REVIEW ==========
    status = db.Column(db.String(16), nullable=False, default=STATUS_PENDING, index=True)
    approved_by = db.Column(db.String(36), nullable=True)
    approved_at = db.Column(db.DateTime, nullable=True)
    rejected_reason = db.Column(db.Text, nullable=True)
    email_verified_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    verifications = db.relationship(
        "EmailVerification", back_populates="registration", cascade="all, delete-orphan"
    )

    __table_args__ = (
        db.Index("idx_registrations_program_intake", "program", "intake_year"),
    )


class EmailVerification(db.Model):
    __tablename__ = "email_verifications"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    registration_id = db.Column(
        db.String(36), db.ForeignKey("registrations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token_hash = db.Column(db.String(64), nullable=False, unique=True)
    expires_at = db.Column(db.DateTime, nullable=False)
    used_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    registration = db.relationship("Registration", back_populates="verifications")
