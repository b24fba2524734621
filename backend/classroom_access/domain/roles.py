"""
Value types shared by the permission resolver, the request-time gates and the
role assignment service.

All of them are immutable snapshots built from the role catalog for a single
request. None of them is cached across requests.
"""
from __future__ import annotations

from dataclasses import dataclass, field


GUEST_ROLE_NAME = "Guest"


@dataclass(frozen=True)
class RoleGrant:
    """A role held by a user, annotated with its level and permission names."""

    name: str
    privilege_level: int
    permissions: frozenset[str] = field(default_factory=frozenset)
    id: int | None = None


@dataclass(frozen=True)
class EffectivePermissionProfile:
    effective_role_name: str
    permissions: frozenset[str]

    def has(self, permission: str) -> bool:
        return permission in self.permissions


@dataclass(frozen=True)
class UserRecord:
    id: int
    email: str
    name: str
    group_id: int | None = None
    group_name: str | None = None


@dataclass(frozen=True)
class UserProfile:
    """Everything a handler needs for ownership and permission decisions."""

    user: UserRecord
    roles: tuple[RoleGrant, ...]
    effective: EffectivePermissionProfile

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def group_id(self) -> int | None:
        return self.user.group_id

    @property
    def permissions(self) -> frozenset[str]:
        return self.effective.permissions

    def can(self, permission: str) -> bool:
        return self.effective.has(permission)

    def owns_or_can(self, owner_id: int | None, permission: str) -> bool:
        """True when the record belongs to this user or the user holds the all-records permission."""
        if owner_id is not None and owner_id == self.user.id:
            return True
        return self.can(permission)
