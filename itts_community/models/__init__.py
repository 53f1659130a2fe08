from .audit_log import AuditLog
from .event import Event, EventRegistration, EventSpeaker
from .mentor import Mentor
from .partner import Partner
from .rbac import Action, Permission, Resource, Role, RolePermission
from .refresh_token import RefreshToken
from .registration import EmailVerification, Registration
from .roadmap import Roadmap, RoadmapItem
from .user import User, UserRole

__all__ = [
    "Action",
    "AuditLog",
    "EmailVerification",
    "Event",
    "EventRegistration",
    "EventSpeaker",
    "Mentor",
    "Partner",
    "Permission",
    "RefreshToken",
    "Registration",
    "Resource",
    "Roadmap",
    "RoadmapItem",
    "Role",
    "RolePermission",
    "User",
    "UserRole",
]
