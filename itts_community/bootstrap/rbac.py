import logging

from itts_community.extensions import db
from itts_community.models.rbac import Action, Permission, Resource, Role

logger = logging.getLogger(__name__)

RESOURCES = (
    "users",
    "roles",
    "permissions",
    "audit_logs",
    "registrations",
    "events",
    "event_speakers",
    "event_registrations",
    "mentors",
    "partners",
    "roadmaps",
    "roadmap_items",
)
ACTIONS = ("create", "read", "update", "delete")

ADMIN_ROLE = "admin"
VIEWER_ROLE = "viewer"


def _get_or_create(model, **kwargs):
    instance = model.query.filter_by(name=kwargs["name"]).first()
    if instance is None:
        instance = model(**kwargs)
        db.session.add(instance)
        db.session.flush()
    return instance


def seed_rbac():
    """
    Create the resource x action permission grid and the system roles.

    Safe to run repeatedly: existing rows are reused and missing role grants
    are added. Returns a mapping of role name to Role.
    """
    resources = {name: _get_or_create(Resource, name=name) for name in RESOURCES}
    actions = {name: _get_or_create(Action, name=name) for name in ACTIONS}

    permissions = []
    for resource_name, resource in resources.items():
        for action_name, action in actions.items():
            permissions.append(_get_or_create(
                Permission,
                name=f"{resource_name}:{action_name}",
                resource_id=resource.id,
                action_id=action.id,
            ))

    grants = {
        ADMIN_ROLE: ("Full access to every admin resource", permissions),
        VIEWER_ROLE: ("Read-only access to admin resources", [p for p in permissions if p.name.endswith(":read")]),
    }

    roles = {}
    for role_name, (description, role_permissions) in grants.items():
        role = _get_or_create(Role, name=role_name, description=description, is_system=True)
        current = {p.id for p in role.permissions}
        for permission in role_permissions:
            if permission.id not in current:
                role.permissions.append(permission)
        roles[role_name] = role

    db.session.commit()
    logger.info("RBAC seeded", extra={"permissions": len(permissions), "roles": sorted(roles)})
    return roles
