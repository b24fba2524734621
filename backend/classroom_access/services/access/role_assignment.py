import logging
from collections.abc import Sequence
from typing import Any

from ...domain.invariants import RoleAssignmentValidator
from ...domain.ports.role_catalog import RoleCatalog
from ...domain.ports.user_directory import UserDirectory
from ...domain.roles import RoleGrant
from ...errors import AppError, InternalError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


def _is_strict_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class RoleAssignmentService:
    """Validates a proposed role set and swaps it in atomically.

    Validation reads only; a rejected request leaves the stored roles
    untouched. The replacement itself is delegated to the catalog, which
    runs it inside a single database transaction.
    """

    def __init__(
        self,
        catalog: RoleCatalog,
        users: UserDirectory,
        validator: RoleAssignmentValidator,
    ):
        self.catalog = catalog
        self.users = users
        self.validator = validator

    async def validate_and_assign(
        self, target_user_id: Any, role_ids: Sequence[Any] | None
    ) -> list[RoleGrant]:
        """
        Replace all roles of a user with ``role_ids``.

        Args:
            target_user_id: User whose roles are replaced
            role_ids: Complete new role set (duplicates collapse)

        Returns:
            The user's role list after the commit

        Raises:
            InvalidInputError: Malformed ids, empty list, or an unknown role id
            NotFoundError: Target user does not exist
            SecurityViolationError: More than one privileged role proposed
            AssignmentViolationError: Proposed roles span several levels
            InternalError: The store failed; nothing was committed
        """
        if not _is_strict_int(target_user_id):
            raise InvalidInputError("Invalid userId.")
        if (
            not isinstance(role_ids, (list, tuple))
            or not role_ids
            or not all(_is_strict_int(role_id) for role_id in role_ids)
        ):
            raise InvalidInputError("Invalid userId or missing/invalid roleIds array.")

        try:
            return await self._assign(target_user_id, list(role_ids))
        except AppError:
            raise
        except Exception as exc:
            logger.error(
                "role_assignment_failed user_id=%s role_ids=%s",
                target_user_id,
                role_ids,
                exc_info=exc,
            )
            raise InternalError("Failed to update user roles.") from exc

    async def _assign(self, user_id: int, role_ids: list[int]) -> list[RoleGrant]:
        if await self.users.get_user(user_id) is None:
            raise NotFoundError(f"User {user_id} not found.")

        privilege_levels: list[int] = []
        for role_id in role_ids:
            level = await self.catalog.get_privilege_level(role_id)
            if level is None:
                raise InvalidInputError(
                    f"Role {role_id} does not exist.", details={"role_id": role_id}
                )
            privilege_levels.append(level)

        self.validator.validate(privilege_levels, user_id=user_id)

        await self.catalog.replace_roles_for_user(user_id, role_ids)
        logger.info("roles_replaced user_id=%s role_ids=%s", user_id, role_ids)
        return await self.catalog.get_roles_for_user(user_id)
