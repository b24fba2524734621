from .base import Base
from .group import Group
from .user import User
from .role import Role
from .permission import Permission
from .role_permission import RolePermission
from .user_role import UserRole

__all__ = [
    "Base",
    "Group",
    "User",
    "Role",
    "Permission",
    "RolePermission",
    "UserRole",
]
