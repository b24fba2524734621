"""
User provisioning and group membership.

Provisioning defaults (the default group and role) are looked up once at
application startup and handed to the service as an immutable value. Nothing
is cached in module state; tests and callers pass the value they want.
"""
import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from ...crud.group import GroupRepository
from ...crud.role import RoleRepository
from ...crud.user import UserRepository, to_user_record
from ...domain.roles import UserRecord
from ...errors import ConflictError, InternalError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProvisioningDefaults:
    group_id: int
    role_id: int


async def load_provisioning_defaults(session: AsyncSession) -> ProvisioningDefaults | None:
    """Resolve the seeded default group and role; None if either is missing."""
    group = await GroupRepository(session).get_default()
    role = await RoleRepository(session).get_default()
    if group is None or role is None:
        logger.warning(
            "provisioning_defaults_missing default_group=%s default_role=%s",
            group is not None,
            role is not None,
        )
        return None
    logger.info("provisioning_defaults_loaded group_id=%s role_id=%s", group.id, role.id)
    return ProvisioningDefaults(group_id=group.id, role_id=role.id)


class UserAdminService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.groups = GroupRepository(session)
        self.roles = RoleRepository(session)

    async def provision_user(
        self, email: str, name: str, defaults: ProvisioningDefaults | None
    ) -> UserRecord:
        """Create a user in the default group holding only the default role."""
        if defaults is None:
            raise InternalError("Provisioning defaults are not configured. Seed the catalog first.")
        if await self.users.get_by_email(email) is not None:
            raise ConflictError(f"User with email '{email}' already exists.")

        try:
            user = await self.users.create(email, name, group_id=defaults.group_id)
            await self.roles.add_to_user(user.id, defaults.role_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "user_provisioned user_id=%s group_id=%s role_id=%s",
            user.id,
            defaults.group_id,
            defaults.role_id,
        )
        record = await self.users.get_user(user.id)
        assert record is not None
        return record

    async def assign_group(self, user_id: int, group_id: int | None) -> UserRecord:
        """Move a user into ``group_id``; None removes the user from every group."""
        user = await self.users.get_by_id(user_id)
        if user is None or not user.is_active:
            raise NotFoundError(f"User {user_id} not found.")
        if group_id is not None and await self.groups.get_by_id(group_id) is None:
            raise InvalidInputError("The provided group_id does not exist.")

        try:
            await self.users.assign_group(user, group_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("user_group_assigned user_id=%s group_id=%s", user_id, group_id)
        refreshed = await self.users.get_by_id(user_id)
        assert refreshed is not None
        return to_user_record(refreshed)
