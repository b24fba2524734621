import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ...auth.permissions import unknown_permissions
from ...crud.group import GroupRepository
from ...crud.permission import PermissionRepository
from ...crud.role import RoleRepository
from ...errors import ConflictError, InvalidInputError, NotFoundError
from ...models.group import Group
from ...models.role import Role

logger = logging.getLogger(__name__)


class CatalogService:
    """Administrator-facing management of groups, roles and role permissions."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.roles = RoleRepository(session)
        self.permissions = PermissionRepository(session)
        self.groups = GroupRepository(session)

    async def list_roles(self) -> list[Role]:
        return await self.roles.list_all()

    async def create_group(
        self,
        name: str,
        logo_url: str | None = None,
        slack_link: str | None = None,
        repo_link: str | None = None,
    ) -> Group:
        if await self.groups.get_by_name(name) is not None:
            raise ConflictError(f"Group name '{name}' already exists.")
        try:
            group = await self.groups.create(
                name, logo_url=logo_url, slack_link=slack_link, repo_link=repo_link
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(group)
        logger.info("group_created group_id=%s name=%r", group.id, name)
        return group

    async def create_role(
        self, name: str, privilege_level: int, description: str | None = None
    ) -> Role:
        if await self.roles.get_by_name(name) is not None:
            raise ConflictError(f"Role name '{name}' already exists.")
        try:
            role = await self.roles.create(name, privilege_level, description=description)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(
            "role_created role_id=%s name=%r privilege_level=%s", role.id, name, privilege_level
        )
        created = await self.roles.get_by_id(role.id)
        assert created is not None
        return created

    async def set_role_permissions(self, role_id: int, permission_names: Sequence[str]) -> Role:
        """Replace the full permission list of one role."""
        unregistered = unknown_permissions(permission_names)
        if unregistered:
            raise InvalidInputError(
                "Unknown permission name(s).", details={"unknown_permissions": unregistered}
            )

        role = await self.roles.get_by_id(role_id)
        if role is None:
            raise NotFoundError(f"Role ID {role_id} not found.")

        permissions = await self.permissions.list_by_names(permission_names)
        missing = sorted(set(permission_names) - {permission.name for permission in permissions})
        if missing:
            raise NotFoundError(
                f"Permission(s) not found: {', '.join(missing)}",
                details={"missing_permissions": missing},
            )

        try:
            await self.roles.set_permissions(role, permissions)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(
            "role_permissions_replaced role_id=%s permissions=%s",
            role_id,
            [permission.name for permission in permissions],
        )
        updated = await self.roles.get_by_id(role_id)
        assert updated is not None
        return updated
