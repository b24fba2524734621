from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from ..roles import RoleGrant


class RoleCatalog(Protocol):
    async def get_roles_for_user(self, user_id: int) -> list[RoleGrant]:
        ...

    async def get_privilege_level(self, role_id: int) -> int | None:
        ...

    async def replace_roles_for_user(self, user_id: int, role_ids: Sequence[int]) -> None:
        """Swap the user's whole role set in one transaction."""
        ...
