"""
Admin endpoints for users, roles, permissions and the audit trail.
"""

from flask import Blueprint, request

from itts_community.schemas.audit import AuditLogOutSchema
from itts_community.schemas.rbac import (
    ActionOutSchema,
    PermissionOutSchema,
    ResourceOutSchema,
    RoleCreateSchema,
    RoleOutSchema,
    RolePermissionsSchema,
    RoleUpdateSchema,
)
from itts_community.schemas.user import (
    AssignRolesSchema,
    RemoveRolesSchema,
    ResetPasswordSchema,
    UserCreateSchema,
    UserOutSchema,
    UserUpdateSchema,
)
from itts_community.security.permissions import current_auth, require_permission
from itts_community.services.audit_service import AuditService
from itts_community.services.permission_service import PermissionService
from itts_community.services.role_service import RoleService
from itts_community.services.user_service import UserService
from itts_community.utils.pagination import arg_bool, arg_str, parse_list_params
from itts_community.utils.responses import created, no_content, ok, paginated
from itts_community.utils.validation import load_json

access_bp = Blueprint("admin_access", __name__, url_prefix="/api/v1/admin")

user_schema = UserOutSchema()
role_schema = RoleOutSchema()
permission_schema = PermissionOutSchema()


def _actor_id():
    return current_auth().user_id


# ===== USERS =====

@access_bp.get("/users")
@require_permission("users:read")
def list_users():
    params = parse_list_params(request.args)
    params.filters = {
        "is_active": arg_bool(request.args, "is_active"),
        "is_super_admin": arg_bool(request.args, "is_super_admin"),
    }
    return paginated(UserService.list_users(params), user_schema)


@access_bp.post("/users")
@require_permission("users:create")
def create_user():
    data = load_json(UserCreateSchema())
    return created(user_schema.dump(UserService.create(data, _actor_id())))


@access_bp.get("/users/<user_id>")
@require_permission("users:read")
def get_user(user_id):
    return ok(user_schema.dump(UserService.get(user_id)))


@access_bp.patch("/users/<user_id>")
@require_permission("users:update")
def update_user(user_id):
    data = load_json(UserUpdateSchema(), partial=True)
    return ok(user_schema.dump(UserService.update(user_id, data, _actor_id())))


@access_bp.delete("/users/<user_id>")
@require_permission("users:delete")
def delete_user(user_id):
    UserService.delete(user_id, _actor_id())
    return no_content()


@access_bp.post("/users/<user_id>/reset-password")
@require_permission("users:update")
def reset_password(user_id):
    data = load_json(ResetPasswordSchema())
    UserService.reset_password(user_id, data["new_password"], _actor_id())
    return no_content()


@access_bp.post("/users/<user_id>/roles")
@require_permission("users:update")
def assign_roles(user_id):
    data = load_json(AssignRolesSchema())
    user = UserService.assign_roles(user_id, data["role_ids"], _actor_id(), expires_at=data.get("expires_at"))
    return ok(user_schema.dump(user))


@access_bp.delete("/users/<user_id>/roles")
@require_permission("users:update")
def remove_roles(user_id):
    data = load_json(RemoveRolesSchema())
    return ok(user_schema.dump(UserService.remove_roles(user_id, data["role_ids"], _actor_id())))


# ===== ROLES =====

@access_bp.get("/roles")
@require_permission("roles:read")
def list_roles():
    params = parse_list_params(request.args)
    params.filters = {"is_system": arg_bool(request.args, "is_system")}
    return paginated(RoleService.list_roles(params), role_schema)


@access_bp.post("/roles")
@require_permission("roles:create")
def create_role():
    data = load_json(RoleCreateSchema())
    return created(role_schema.dump(RoleService.create(data, _actor_id())))


@access_bp.get("/roles/<role_id>")
@require_permission("roles:read")
def get_role(role_id):
    return ok(role_schema.dump(RoleService.get(role_id)))


@access_bp.patch("/roles/<role_id>")
@require_permission("roles:update")
def update_role(role_id):
    data = load_json(RoleUpdateSchema(), partial=True)
    return ok(role_schema.dump(RoleService.update(role_id, data, _actor_id())))


@access_bp.delete("/roles/<role_id>")
@require_permission("roles:delete")
def delete_role(role_id):
    RoleService.delete(role_id, _actor_id())
    return no_content()


@access_bp.get("/roles/<role_id>/permissions")
@require_permission("roles:read")
def list_role_permissions(role_id):
    role = RoleService.get(role_id)
    return ok(permission_schema.dump(role.permissions, many=True))


@access_bp.post("/roles/<role_id>/permissions")
@require_permission("roles:update")
def assign_permissions(role_id):
    data = load_json(RolePermissionsSchema())
    return ok(role_schema.dump(RoleService.assign_permissions(role_id, data["permission_ids"], _actor_id())))


@access_bp.delete("/roles/<role_id>/permissions")
@require_permission("roles:update")
def remove_permissions(role_id):
    data = load_json(RolePermissionsSchema())
    return ok(role_schema.dump(RoleService.remove_permissions(role_id, data["permission_ids"], _actor_id())))


# ===== PERMISSIONS =====

@access_bp.get("/permissions")
@require_permission("permissions:read")
def list_permissions():
    params = parse_list_params(request.args)
    params.filters = {
        "resource_id": arg_str(request.args, "resource_id"),
        "action_id": arg_str(request.args, "action_id"),
    }
    return paginated(PermissionService.list_permissions(params), permission_schema)


@access_bp.get("/permissions/<permission_id>")
@require_permission("permissions:read")
def get_permission(permission_id):
    return ok(permission_schema.dump(PermissionService.get_permission(permission_id)))


@access_bp.get("/resources")
@require_permission("permissions:read")
def list_resources():
    return ok(ResourceOutSchema().dump(PermissionService.list_resources(), many=True))


@access_bp.get("/actions")
@require_permission("permissions:read")
def list_actions():
    return ok(ActionOutSchema().dump(PermissionService.list_actions(), many=True))


# ===== AUDIT LOGS =====

@access_bp.get("/audit-logs")
@require_permission("audit_logs:read")
def list_audit_logs():
    params = parse_list_params(request.args)
    params.filters = {
        "user_id": arg_str(request.args, "user_id"),
        "action": arg_str(request.args, "action"),
        "resource_type": arg_str(request.args, "resource_type"),
    }
    return paginated(AuditService.list_logs(params), AuditLogOutSchema())
