import uuid

from itts_community.extensions import db
from itts_community.utils.timeutil import utcnow


class Role(db.Model):
    __tablename__ = "roles"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(100), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    # System roles are seeded and cannot be deleted through the API
    is_system = db.Column(db.Boolean, nullable=False, default=False)
    parent_role_id = db.Column(db.String(36), db.ForeignKey("roles.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    permissions = db.relationship(
        "Permission",
        secondary="role_permissions",
        lazy="selectin",
        order_by="Permission.name",
    )
    user_assignments = db.relationship("UserRole", back_populates="role", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Role {self.name}>"


class Resource(db.Model):
    __tablename__ = "resources"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class Action(db.Model):
    __tablename__ = "actions"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(50), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class Permission(db.Model):
    __tablename__ = "permissions"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    resource_id = db.Column(db.String(36), db.ForeignKey("resources.id", ondelete="CASCADE"), nullable=False)
    action_id = db.Column(db.String(36), db.ForeignKey("actions.id", ondelete="CASCADE"), nullable=False)
    # "<resource>:<action>", e.g. "events:create"
    name = db.Column(db.String(150), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    resource = db.relationship("Resource", lazy="joined")
    action = db.relationship("Action", lazy="joined")

    __table_args__ = (
        db.UniqueConstraint("resource_id", "action_id", name="uq_permissions_resource_action"),
    )

    def __repr__(self):
        return f"<Permission {self.name}>"


class RolePermission(db.Model):
    __tablename__ = "role_permissions"

    role_id = db.Column(db.String(36), db.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)
    permission_id = db.Column(db.String(36), db.ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
