from __future__ import annotations

from typing import Protocol

from ..roles import UserRecord


class UserDirectory(Protocol):
    async def get_user(self, user_id: int) -> UserRecord | None:
        ...
