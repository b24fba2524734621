import logging

from ...auth.permission_resolver import resolve_permissions
from ...domain.ports.role_catalog import RoleCatalog
from ...domain.ports.user_directory import UserDirectory
from ...domain.roles import UserProfile
from ...errors import InternalError, NotFoundError, UnauthenticatedError

logger = logging.getLogger(__name__)


class UserContextLoader:
    """Loads the full profile of the caller.

    Unlike AuthorizationGate this never rejects on a missing permission; it
    only rejects when there is no identity or no user behind it. Permission
    checks on the returned profile are the caller's job.
    """

    def __init__(self, users: UserDirectory, catalog: RoleCatalog):
        self.users = users
        self.catalog = catalog

    async def load(self, user_id: int | None) -> UserProfile:
        if user_id is None:
            raise UnauthenticatedError("Unauthorized")

        try:
            user = await self.users.get_user(user_id)
            roles = await self.catalog.get_roles_for_user(user_id) if user is not None else []
        except Exception as exc:
            logger.error("user_context_lookup_failed user_id=%s", user_id, exc_info=exc)
            raise InternalError("Server error loading user context.") from exc

        if user is None:
            raise NotFoundError("User profile not found.")

        return UserProfile(
            user=user,
            roles=tuple(roles),
            effective=resolve_permissions(roles),
        )
