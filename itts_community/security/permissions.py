"""
Request-scoped authorization context and the route decorators built on it.

The context is a snapshot of the claims carried by the access token; nothing
here touches the database.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, FrozenSet, Optional, TypeVar, cast

from flask import g

from itts_community.errors import Forbidden, Unauthorized

F = TypeVar("F", bound=Callable[..., Any])

WILDCARD_PERMISSION = "*:*"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    """Identity and RBAC snapshot of the authenticated caller"""

    user_id: str
    email: str
    is_super_admin: bool = False
    roles: FrozenSet[str] = field(default_factory=frozenset)
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_claims(cls, claims: dict) -> AuthContext:
        return cls(
            user_id=str(claims.get("user_id") or claims["sub"]),
            email=claims.get("email", ""),
            is_super_admin=bool(claims.get("is_super_admin", False)),
            roles=frozenset(claims.get("roles") or ()),
            permissions=frozenset(claims.get("permissions") or ()),
        )

    def has_permission(self, permission: str) -> bool:
        if self.is_super_admin or WILDCARD_PERMISSION in self.permissions:
            return True
        return permission in self.permissions


def current_auth() -> Optional[AuthContext]:
    """The caller's context, or None for anonymous requests."""
    return g.get("auth")


def _authenticated() -> AuthContext:
    auth = current_auth()
    if auth is None:
        raise Unauthorized(g.get("auth_error") or "Authentication required")
    return auth


def require_auth(func: F) -> F:
    @wraps(func)
    def wrapper(*args, **kwargs):
        _authenticated()
        return func(*args, **kwargs)
    return cast(F, wrapper)


def require_permission(*permissions: str):
    """
    Decorator requiring every listed permission.

    Usage:
        @require_permission("mentors:create")
    """
    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args, **kwargs):
            auth = _authenticated()
            missing = [p for p in permissions if not auth.has_permission(p)]
            if missing:
                logger.warning(
                    "Permission denied",
                    extra={"user_id": auth.user_id, "missing": missing, "endpoint": func.__name__},
                )
                raise Forbidden(f"Missing permission: {', '.join(missing)}")
            return func(*args, **kwargs)
        return cast(F, wrapper)
    return decorator
