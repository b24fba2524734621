from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.permission import Permission


class PermissionRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, name: str, description: str | None = None) -> Permission:
        permission = Permission(name=name, description=description)
        self.session.add(permission)
        await self.session.flush()
        return permission

    async def get_by_name(self, name: str) -> Permission | None:
        result = await self.session.execute(
            select(Permission).where(Permission.name == name)
        )
        return result.scalar_one_or_none()

    async def list_by_names(self, names: Iterable[str]) -> list[Permission]:
        names = list(dict.fromkeys(names))
        if not names:
            return []
        result = await self.session.execute(
            select(Permission).where(Permission.name.in_(names)).order_by(Permission.name)
        )
        return list(result.scalars().all())
