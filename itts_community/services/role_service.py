from itts_community.errors import BadRequest, Conflict, Forbidden, NotFound
from itts_community.extensions import db
from itts_community.models.rbac import Permission, Role
from itts_community.services.audit_service import AuditService
from itts_community.utils.pagination import list_query


def _load_permissions(permission_ids):
    permission_ids = list(dict.fromkeys(permission_ids))
    if not permission_ids:
        return []
    permissions = Permission.query.filter(Permission.id.in_(permission_ids)).all()
    found = {p.id for p in permissions}
    missing = [pid for pid in permission_ids if pid not in found]
    if missing:
        raise BadRequest("Unknown permission ids", {"permission_ids": missing})
    return permissions


class RoleService:

    @staticmethod
    def get(role_id):
        role = db.session.get(Role, role_id)
        if role is None:
            raise NotFound("role", role_id)
        return role

    @staticmethod
    def list_roles(params):
        return list_query(
            Role.query,
            Role,
            params,
            search_columns=(Role.name, Role.description),
            sort_fields={"name": Role.name, "created_at": Role.created_at},
            default_sort=(Role.name.asc(),),
        )

    @staticmethod
    def _check_parent(parent_role_id, role_id=None):
        if parent_role_id is None:
            return
        if parent_role_id == role_id:
            raise BadRequest("A role cannot be its own parent")
        RoleService.get(parent_role_id)

    @staticmethod
    def create(data, actor_id):
        if Role.query.filter_by(name=data["name"]).first():
            raise Conflict("Role name already exists")
        RoleService._check_parent(data.get("parent_role_id"))

        role = Role(
            name=data["name"],
            description=data.get("description"),
            parent_role_id=data.get("parent_role_id"),
        )
        role.permissions = _load_permissions(data.get("permission_ids") or [])
        db.session.add(role)
        db.session.flush()
        AuditService.record("role.create", user_id=actor_id, resource_type="role", resource_id=role.id,
                            metadata={"name": role.name})
        db.session.commit()
        return role

    @staticmethod
    def update(role_id, data, actor_id):
        role = RoleService.get(role_id)
        if "name" in data and data["name"] != role.name:
            if Role.query.filter(Role.name == data["name"], Role.id != role.id).first():
                raise Conflict("Role name already exists")
            role.name = data["name"]
        if "description" in data:
            role.description = data["description"]
        if "parent_role_id" in data:
            RoleService._check_parent(data["parent_role_id"], role.id)
            role.parent_role_id = data["parent_role_id"]

        AuditService.record("role.update", user_id=actor_id, resource_type="role", resource_id=role.id,
                            metadata={"fields": sorted(data.keys())})
        db.session.commit()
        return role

    @staticmethod
    def delete(role_id, actor_id):
        role = RoleService.get(role_id)
        if role.is_system:
            raise Forbidden("Cannot delete system role")
        db.session.delete(role)
        AuditService.record("role.delete", user_id=actor_id, resource_type="role", resource_id=role_id,
                            metadata={"name": role.name})
        db.session.commit()

    @staticmethod
    def assign_permissions(role_id, permission_ids, actor_id):
        role = RoleService.get(role_id)
        current = {p.id for p in role.permissions}
        for permission in _load_permissions(permission_ids):
            if permission.id not in current:
                role.permissions.append(permission)
        AuditService.record("role.permissions.assign", user_id=actor_id, resource_type="role",
                            resource_id=role.id, metadata={"permission_ids": list(permission_ids)})
        db.session.commit()
        return role

    @staticmethod
    def remove_permissions(role_id, permission_ids, actor_id):
        role = RoleService.get(role_id)
        drop = set(permission_ids)
        role.permissions = [p for p in role.permissions if p.id not in drop]
        AuditService.record("role.permissions.remove", user_id=actor_id, resource_type="role",
                            resource_id=role.id, metadata={"permission_ids": list(permission_ids)})
        db.session.commit()
        return role
