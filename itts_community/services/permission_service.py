from sqlalchemy import or_

from itts_community.errors import NotFound
from itts_community.extensions import db
from itts_community.models.rbac import Action, Permission, Resource, Role, RolePermission
from itts_community.models.user import UserRole
from itts_community.security.permissions import WILDCARD_PERMISSION
from itts_community.utils.pagination import list_query
from itts_community.utils.timeutil import utcnow


def _active_assignment(user_id, now):
    return (
        UserRole.user_id == user_id,
        or_(UserRole.expires_at.is_(None), UserRole.expires_at > now),
    )


class PermissionService:
    """Role and permission resolution for token issuance, plus catalog reads."""

    @staticmethod
    def role_names(user):
        now = utcnow()
        rows = (
            db.session.query(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .filter(*_active_assignment(user.id, now))
            .distinct()
            .order_by(Role.name)
            .all()
        )
        return [name for (name,) in rows]

    @staticmethod
    def resolve_permissions(user):
        """
        Distinct permission names reachable through the user's unexpired role
        assignments, sorted. Super-admins get the wildcard only.
        """
        if user.is_super_admin:
            return [WILDCARD_PERMISSION]

        now = utcnow()
        rows = (
            db.session.query(Permission.name)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(UserRole, UserRole.role_id == RolePermission.role_id)
            .filter(*_active_assignment(user.id, now))
            .distinct()
            .order_by(Permission.name)
            .all()
        )
        return [name for (name,) in rows]

    @staticmethod
    def get_permission(permission_id):
        permission = db.session.get(Permission, permission_id)
        if permission is None:
            raise NotFound("permission", permission_id)
        return permission

    @staticmethod
    def list_permissions(params):
        return list_query(
            Permission.query,
            Permission,
            params,
            search_columns=(Permission.name, Permission.description),
            sort_fields={"name": Permission.name, "created_at": Permission.created_at},
            default_sort=(Permission.name.asc(),),
        )

    @staticmethod
    def list_resources():
        return Resource.query.order_by(Resource.name).all()

    @staticmethod
    def list_actions():
        return Action.query.order_by(Action.name).all()
