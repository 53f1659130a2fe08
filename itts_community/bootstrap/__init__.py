from .admin import create_admin_user
from .rbac import seed_rbac

__all__ = ["create_admin_user", "seed_rbac"]
