"""
Default access catalog: permissions, groups, roles and role-permission links.

The catalog is validated against the permission registry before anything is
written. Seeding is idempotent: existing rows are kept and only missing
rows and links are added.
"""
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from ...auth.permissions import PERMISSION_DESCRIPTIONS, Permission, unknown_permissions
from ...crud.group import GroupRepository
from ...crud.permission import PermissionRepository
from ...crud.role import RoleRepository
from ...domain.roles import GUEST_ROLE_NAME

logger = logging.getLogger(__name__)

_BASELINE = (Permission.VIEW_FAQ_SYSTEM, Permission.VIEW_DOCS_MANAGER)


@dataclass(frozen=True)
class RoleSeed:
    name: str
    privilege_level: int
    description: str
    permissions: tuple[str, ...] = ()
    is_default: bool = False


@dataclass(frozen=True)
class GroupSeed:
    name: str
    is_default: bool = False


@dataclass
class SeedSummary:
    permissions_created: int = 0
    groups_created: int = 0
    roles_created: int = 0
    links_created: int = 0
    skipped: list[str] = field(default_factory=list)


DEFAULT_GROUPS: tuple[GroupSeed, ...] = (GroupSeed(name="Unassigned", is_default=True),)

DEFAULT_ROLES: tuple[RoleSeed, ...] = (
    RoleSeed(
        name=GUEST_ROLE_NAME,
        privilege_level=0,
        description="Read-only visitor",
        permissions=tuple(p.value for p in _BASELINE),
    ),
    RoleSeed(
        name="Student",
        privilege_level=1,
        description="Enrolled student",
        is_default=True,
        permissions=tuple(
            p.value
            for p in (
                Permission.EDIT_OWN_PROFILE_DATA,
                Permission.USER_SUBMIT_JOURNAL,
                Permission.VIEW_OWN_JOURNAL_SENTIMENT,
                Permission.VIEW_OWN_ATTENDANCE_REPORTS,
                Permission.VIEW_DEFINITION_OF_DONE,
                *_BASELINE,
            )
        ),
    ),
    RoleSeed(
        name="Group Leader",
        privilege_level=1,
        description="Student who leads a project group",
        permissions=tuple(
            p.value
            for p in (
                Permission.GROUP_MANAGE_ATTENDANCE,
                Permission.MANAGE_GROUP_FILES,
                Permission.VIEW_OWN_GROUP_JOURNALS,
                Permission.VIEW_CLASS_DIRECTORY,
                *_BASELINE,
            )
        ),
    ),
    RoleSeed(
        name="Tutor",
        privilege_level=5,
        description="Lab tutor",
        permissions=tuple(
            p.value
            for p in (
                Permission.VIEW_OWN_GROUP_JOURNALS,
                Permission.VIEW_CLASS_DIRECTORY,
                Permission.MANAGE_LAB_QUEUE,
                Permission.PROMOTE_TO_FAQ,
                Permission.SUBMIT_NEGATIVE_INTERACTION,
                Permission.SUBMIT_LAB_OBSERVATIONS,
                *_BASELINE,
            )
        ),
    ),
    RoleSeed(
        name="TA",
        privilege_level=50,
        description="Teaching assistant",
        permissions=tuple(
            p.value
            for p in (
                Permission.ASSIGN_GROUPS,
                Permission.MANAGE_ALL_ATTENDANCE,
                Permission.VIEW_ALL_ATTENDANCE_REPORTS,
                Permission.VIEW_ALL_JOURNALS,
                Permission.EDIT_ALL_JOURNALS,
                Permission.MANAGE_DOCS_MANAGER,
                Permission.MANAGE_DEFINITION_OF_DONE,
                *_BASELINE,
            )
        ),
    ),
    RoleSeed(
        name="Professor",
        privilege_level=100,
        description="Course instructor",
        permissions=tuple(
            p.value
            for p in (
                Permission.MANAGE_SYSTEM_CONFIG,
                Permission.PROVISION_USERS,
                Permission.VIEW_LOGS,
                Permission.MANAGE_ROLES,
                Permission.ASSIGN_ROLES,
                Permission.ASSIGN_GROUPS,
                Permission.EDIT_ALL_PROFILE_DATA,
                Permission.VIEW_REPORTING_ENGINE,
                Permission.VIEW_CLASS_DIRECTORY,
                *_BASELINE,
            )
        ),
    ),
)


def validate_catalog(
    roles: Sequence[RoleSeed] = DEFAULT_ROLES,
    groups: Sequence[GroupSeed] = DEFAULT_GROUPS,
) -> None:
    """Raise ValueError listing every inconsistency in the catalog."""
    errors: list[str] = []

    for role in roles:
        for name in unknown_permissions(role.permissions):
            errors.append(f"Role '{role.name}' references non-existent permission '{name}'.")
        if role.privilege_level < 0:
            errors.append(f"Role '{role.name}' has a negative privilege level.")

    role_names = [role.name for role in roles]
    if len(set(role_names)) != len(role_names):
        errors.append("Role names must be unique.")
    group_names = [group.name for group in groups]
    if len(set(group_names)) != len(group_names):
        errors.append("Group names must be unique.")
    if sum(role.is_default for role in roles) > 1:
        errors.append("At most one role may be the default.")
    if sum(group.is_default for group in groups) > 1:
        errors.append("At most one group may be the default.")

    if errors:
        raise ValueError("Catalog validation failed:\n" + "\n".join(errors))


async def seed_catalog(
    session: AsyncSession,
    roles: Sequence[RoleSeed] = DEFAULT_ROLES,
    groups: Sequence[GroupSeed] = DEFAULT_GROUPS,
    descriptions: Mapping[Permission, str] = PERMISSION_DESCRIPTIONS,
) -> SeedSummary:
    """Validate, then insert whatever part of the catalog is missing and commit.

    Raises:
        ValueError: The catalog references unregistered permissions or
            is otherwise inconsistent; nothing is written
    """
    validate_catalog(roles, groups)

    summary = SeedSummary()
    permission_repo = PermissionRepository(session)
    group_repo = GroupRepository(session)
    role_repo = RoleRepository(session)

    try:
        permission_map = {}
        for permission in Permission:
            existing = await permission_repo.get_by_name(permission.value)
            if existing is not None:
                permission_map[permission.value] = existing
                continue
            permission_map[permission.value] = await permission_repo.create(
                permission.value, description=descriptions.get(permission)
            )
            summary.permissions_created += 1

        for group_seed in groups:
            if await group_repo.get_by_name(group_seed.name) is not None:
                summary.skipped.append(f"group:{group_seed.name}")
                continue
            await group_repo.create(group_seed.name, is_default=group_seed.is_default)
            summary.groups_created += 1

        for role_seed in roles:
            role = await role_repo.get_by_name(role_seed.name)
            if role is None:
                role = await role_repo.create(
                    role_seed.name,
                    role_seed.privilege_level,
                    description=role_seed.description,
                    is_default=role_seed.is_default,
                )
                role = await role_repo.get_by_id(role.id)
                summary.roles_created += 1
            else:
                summary.skipped.append(f"role:{role_seed.name}")

            current = {permission.name for permission in role.permissions}
            wanted = list(dict.fromkeys(role_seed.permissions))
            missing = [name for name in wanted if name not in current]
            if missing:
                await role_repo.set_permissions(
                    role, [*role.permissions, *(permission_map[name] for name in missing)]
                )
                summary.links_created += len(missing)

        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(
        "catalog_seeded permissions=%s groups=%s roles=%s links=%s",
        summary.permissions_created,
        summary.groups_created,
        summary.roles_created,
        summary.links_created,
    )
    return summary
