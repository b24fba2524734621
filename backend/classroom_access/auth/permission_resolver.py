"""
Effective permission resolution.

Least-privileged precedence: the lowest privilege level among a user's roles
overrides all others. Roles above that level are discarded outright, and
permissions only stack between roles that share the lowest level. A user who
drops back to "Student" therefore cannot keep permissions from a stale TA or
Professor grant.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from ..domain.roles import GUEST_ROLE_NAME, EffectivePermissionProfile, RoleGrant

logger = logging.getLogger(__name__)


def resolve_permissions(roles: Iterable[RoleGrant]) -> EffectivePermissionProfile:
    roles = list(roles)
    if not roles:
        return EffectivePermissionProfile(
            effective_role_name=GUEST_ROLE_NAME, permissions=frozenset()
        )

    lowest_level = min(role.privilege_level for role in roles)
    effective_roles = [role for role in roles if role.privilege_level == lowest_level]

    permissions: set[str] = set()
    for role in effective_roles:
        permissions.update(role.permissions)

    effective_role_name = ", ".join(role.name for role in effective_roles) or GUEST_ROLE_NAME

    logger.debug(
        "permissions_resolved level=%s roles=%r permission_count=%s",
        lowest_level,
        effective_role_name,
        len(permissions),
    )
    return EffectivePermissionProfile(
        effective_role_name=effective_role_name,
        permissions=frozenset(permissions),
    )
