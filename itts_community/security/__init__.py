from .passwords import hash_password, verify_password
from .permissions import (
    WILDCARD_PERMISSION,
    AuthContext,
    current_auth,
    require_auth,
    require_permission,
)
from .tokens import TokenManager

__all__ = [
    "WILDCARD_PERMISSION",
    "AuthContext",
    "TokenManager",
    "current_auth",
    "hash_password",
    "require_auth",
    "require_permission",
    "verify_password",
]
