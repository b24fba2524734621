from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.group import Group


class GroupRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        name: str,
        logo_url: str | None = None,
        slack_link: str | None = None,
        repo_link: str | None = None,
        is_default: bool = False,
    ) -> Group:
        group = Group(
            name=name,
            logo_url=logo_url,
            slack_link=slack_link,
            repo_link=repo_link,
            is_default=is_default,
        )
        self.session.add(group)
        await self.session.flush()
        return group

    async def get_by_id(self, group_id: int) -> Group | None:
        return await self.session.get(Group, group_id)

    async def get_by_name(self, name: str) -> Group | None:
        result = await self.session.execute(select(Group).where(Group.name == name))
        return result.scalar_one_or_none()

    async def get_default(self) -> Group | None:
        result = await self.session.execute(
            select(Group).where(Group.is_default).order_by(Group.id).limit(1)
        )
        return result.scalar_one_or_none()
