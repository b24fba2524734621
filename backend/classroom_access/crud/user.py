from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.roles import UserRecord
from ..models.user import User


def to_user_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        email=user.email,
        name=user.name,
        group_id=user.group_id,
        group_name=user.group.name if user.group is not None else None,
    )


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, email: str, name: str, group_id: int | None = None) -> User:
        user = User(email=email, name=name, group_id=group_id)
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: int) -> User | None:
        result = await self.session.execute(
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_user(self, user_id: int) -> UserRecord | None:
        user = await self.get_by_id(user_id)
        if user is None or not user.is_active:
            return None
        return to_user_record(user)

    async def assign_group(self, user: User, group_id: int | None) -> User:
        user.group_id = group_id
        await self.session.flush()
        return user
