import logging

from itts_community.errors import BadRequest, Conflict, Forbidden, NotFound
from itts_community.extensions import db
from itts_community.models.rbac import Role
from itts_community.models.user import User, UserRole
from itts_community.security.passwords import hash_password
from itts_community.services.audit_service import AuditService
from itts_community.services.auth_service import normalize_email
from itts_community.services.token_service import TokenService
from itts_community.utils.pagination import list_query
from itts_community.utils.timeutil import to_naive_utc

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "email": User.email,
    "full_name": User.full_name,
    "created_at": User.created_at,
    "last_login_at": User.last_login_at,
}


def _load_roles(role_ids):
    role_ids = list(dict.fromkeys(role_ids))
    if not role_ids:
        return []
    roles = Role.query.filter(Role.id.in_(role_ids)).all()
    found = {r.id for r in roles}
    missing = [rid for rid in role_ids if rid not in found]
    if missing:
        raise BadRequest("Unknown role ids", {"role_ids": missing})
    return roles


class UserService:

    @staticmethod
    def get(user_id):
        user = db.session.get(User, user_id)
        if user is None:
            raise NotFound("user", user_id)
        return user

    @staticmethod
    def list_users(params):
        return list_query(
            User.query,
            User,
            params,
            search_columns=(User.email, User.full_name),
            sort_fields=SORT_FIELDS,
            default_sort=(User.created_at.desc(),),
        )

    @staticmethod
    def create(data, actor_id):
        email = normalize_email(data["email"])
        if User.query.filter_by(email=email).first():
            raise Conflict("Email already registered")

        roles = _load_roles(data.get("role_ids") or [])
        try:
            user = User(
                email=email,
                full_name=data.get("full_name"),
                password_hash=hash_password(data["password"]),
                is_active=data.get("is_active", True),
                is_super_admin=data.get("is_super_admin", False),
            )
            db.session.add(user)
            db.session.flush()
            for role in roles:
                db.session.add(UserRole(user_id=user.id, role_id=role.id, granted_by=actor_id))
            AuditService.record("user.create", user_id=actor_id, resource_type="user", resource_id=user.id,
                                metadata={"email": email, "role_ids": [r.id for r in roles]})
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        db.session.refresh(user)
        logger.info("User created", extra={"user_id": user.id, "actor_id": actor_id})
        return user

    @staticmethod
    def update(user_id, data, actor_id):
        user = UserService.get(user_id)
        try:
            if "email" in data:
                email = normalize_email(data["email"])
                if User.query.filter(User.email == email, User.id != user.id).first():
                    raise Conflict("Email already in use")
                user.email = email
            for field in ("full_name", "is_active", "is_super_admin"):
                if field in data:
                    setattr(user, field, data[field])

            if "role_ids" in data:
                roles = _load_roles(data["role_ids"])
                # Replace the role set atomically with the other changes
                UserRole.query.filter_by(user_id=user.id).delete(synchronize_session=False)
                for role in roles:
                    db.session.add(UserRole(user_id=user.id, role_id=role.id, granted_by=actor_id))

            AuditService.record("user.update", user_id=actor_id, resource_type="user", resource_id=user.id,
                                metadata={"fields": sorted(data.keys())})
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        db.session.refresh(user)
        return user

    @staticmethod
    def delete(user_id, actor_id):
        user = UserService.get(user_id)
        if user.is_super_admin:
            raise Forbidden("Cannot delete super admin user")

        db.session.delete(user)
        AuditService.record("user.delete", user_id=actor_id, resource_type="user", resource_id=user_id,
                            metadata={"email": user.email})
        db.session.commit()

    @staticmethod
    def reset_password(user_id, new_password, actor_id):
        user = UserService.get(user_id)
        try:
            user.password_hash = hash_password(new_password)
            revoked = TokenService.revoke_all_for_user(user.id)
            AuditService.record("user.password.reset", user_id=actor_id, resource_type="user", resource_id=user.id,
                                metadata={"revoked_tokens": revoked})
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    @staticmethod
    def assign_roles(user_id, role_ids, actor_id, expires_at=None):
        """Grant roles; re-granting an existing role refreshes its expiry."""
        user = UserService.get(user_id)
        roles = _load_roles(role_ids)
        expires_at = to_naive_utc(expires_at)

        existing = {a.role_id: a for a in user.role_assignments}
        try:
            for role in roles:
                assignment = existing.get(role.id)
                if assignment is None:
                    db.session.add(UserRole(user_id=user.id, role_id=role.id, granted_by=actor_id,
                                            expires_at=expires_at))
                else:
                    assignment.expires_at = expires_at
                    assignment.granted_by = actor_id
            AuditService.record("user.roles.assign", user_id=actor_id, resource_type="user", resource_id=user.id,
                                metadata={"role_ids": [r.id for r in roles]})
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        db.session.refresh(user)
        return user

    @staticmethod
    def remove_roles(user_id, role_ids, actor_id):
        user = UserService.get(user_id)
        UserRole.query.filter(
            UserRole.user_id == user.id, UserRole.role_id.in_(role_ids)
        ).delete(synchronize_session=False)
        AuditService.record("user.roles.remove", user_id=actor_id, resource_type="user", resource_id=user.id,
                            metadata={"role_ids": list(role_ids)})
        db.session.commit()
        db.session.refresh(user)
        return user
