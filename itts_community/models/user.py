import uuid

from itts_community.extensions import db
from itts_community.utils.timeutil import utcnow


class User(db.Model):
    __tablename__ = "users"

    # ========== IDENTIFICATION ==========
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    full_name = db.Column(db.String(255), nullable=True)
    # NULL for accounts that only ever signed in through an OAuth provider
    password_hash = db.Column(db.String(255), nullable=True)

    # ========== ACCOUNT STATUS ==========
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    is_super_admin = db.Column(db.Boolean, nullable=False, default=False)
    last_login_at = db.Column(db.DateTime, nullable=True)

    # ========== TIMESTAMPS ==========
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # ========== RELATIONSHIPS ==========
    role_assignments = db.relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
        foreign_keys="UserRole.user_id",
        lazy="selectin",
    )
    refresh_tokens = db.relationship(
        "RefreshToken", back_populates="user", cascade="all, delete-orphan"
    )

    __table_args__ = (
        db.Index("idx_users_active", "is_active"),
    )

    def active_roles(self, now=None):
        """Roles whose assignment has not expired."""
        now = now or utcnow()
        return [
            a.role for a in self.role_assignments
            if a.expires_at is None or a.expires_at > now
        ]

    @property
    def roles(self):
        return sorted(self.active_roles(), key=lambda r: r.name)

    @property
    def has_password(self):
        return bool(self.password_hash)

    def __repr__(self):
        return f"<User {self.email}>"


class UserRole(db.Model):
    __tablename__ = "user_roles"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role_id = db.Column(db.String(36), db.ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True)
    granted_by = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    granted_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    # NULL means the assignment is permanent
    expires_at = db.Column(db.DateTime, nullable=True)

    user = db.relationship("User", back_populates="role_assignments", foreign_keys=[user_id])
    role = db.relationship("Role", back_populates="user_assignments", lazy="joined")

    __table_args__ = (
        db.UniqueConstraint("user_id", "role_id", name="uq_user_roles_user_role"),
    )
