from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.roles import RoleGrant
from ..models.permission import Permission
from ..models.role import Role
from ..models.user import User
from ..models.user_role import UserRole


def to_role_grant(role: Role) -> RoleGrant:
    return RoleGrant(
        id=role.id,
        name=role.name,
        privilege_level=role.privilege_level,
        permissions=frozenset(permission.name for permission in role.permissions),
    )


class RoleRepository:
    """SQLAlchemy-backed role catalog.

    Reads always go to the database (``populate_existing``) so an
    authorization decision reflects the latest committed role assignments,
    never objects left over in the session identity map.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        name: str,
        privilege_level: int,
        description: str | None = None,
        is_default: bool = False,
    ) -> Role:
        role = Role(
            name=name,
            privilege_level=privilege_level,
            description=description,
            is_default=is_default,
        )
        self.session.add(role)
        await self.session.flush()
        return role

    async def get_by_id(self, role_id: int) -> Role | None:
        result = await self.session.execute(
            select(Role)
            .where(Role.id == role_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Role | None:
        result = await self.session.execute(
            select(Role)
            .where(Role.name == name)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_default(self) -> Role | None:
        result = await self.session.execute(
            select(Role).where(Role.is_default).order_by(Role.id).limit(1)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Role]:
        result = await self.session.execute(
            select(Role)
            .order_by(Role.privilege_level, Role.name)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def set_permissions(self, role: Role, permissions: Sequence[Permission]) -> Role:
        role.permissions = list(permissions)
        await self.session.flush()
        return role

    async def get_roles_for_user(self, user_id: int) -> list[RoleGrant]:
        """Current roles of an active user; unknown and inactive users hold none."""
        result = await self.session.execute(
            select(Role)
            .join(UserRole, UserRole.role_id == Role.id)
            .join(User, User.id == UserRole.user_id)
            .where(UserRole.user_id == user_id, User.is_active)
            .order_by(UserRole.id)
            .execution_options(populate_existing=True)
        )
        return [to_role_grant(role) for role in result.scalars().all()]

    async def get_privilege_level(self, role_id: int) -> int | None:
        result = await self.session.execute(
            select(Role.privilege_level).where(Role.id == role_id)
        )
        return result.scalar_one_or_none()

    async def add_to_user(self, user_id: int, role_id: int) -> UserRole:
        user_role = UserRole(user_id=user_id, role_id=role_id)
        self.session.add(user_role)
        await self.session.flush()
        return user_role

    async def replace_roles_for_user(self, user_id: int, role_ids: Sequence[int]) -> None:
        """Replace every role of ``user_id`` with ``role_ids`` and commit.

        Delete and insert share one transaction: concurrent readers see the
        complete old set until commit and the complete new set after it. Any
        failure, cancellation included, rolls the whole replacement back.
        """
        try:
            await self.session.execute(delete(UserRole).where(UserRole.user_id == user_id))
            self.session.add_all(
                [UserRole(user_id=user_id, role_id=role_id) for role_id in dict.fromkeys(role_ids)]
            )
            await self.session.flush()
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise
