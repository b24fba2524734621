import logging

from ...auth.permission_resolver import resolve_permissions
from ...auth.permissions import Permission, validate_permission
from ...domain.ports.role_catalog import RoleCatalog
from ...domain.roles import EffectivePermissionProfile
from ...errors import ForbiddenError, InternalError, UnauthenticatedError

logger = logging.getLogger(__name__)


class AuthorizationGate:
    """Answers "may this identity perform this one action".

    SECURITY: fails closed. A missing identity, a missing permission and a
    failed lookup all end in an exception; there is no path that defaults to
    allow.
    """

    def __init__(self, permission: Permission | str):
        # Unknown names raise ValueError here, when the route is declared.
        self.permission = validate_permission(permission)

    async def check(self, user_id: int | None, catalog: RoleCatalog) -> EffectivePermissionProfile:
        """
        Args:
            user_id: Resolved identity of the caller, None when unauthenticated
            catalog: Role catalog to read the caller's current roles from

        Returns:
            The resolved profile (callers may ignore it)

        Raises:
            UnauthenticatedError: No identity
            ForbiddenError: Required permission absent from the resolved set
            InternalError: Role lookup failed
        """
        if user_id is None:
            raise UnauthenticatedError("Authentication required.")

        try:
            roles = await catalog.get_roles_for_user(user_id)
        except Exception as exc:
            logger.error(
                "authorization_lookup_failed user_id=%s permission=%s",
                user_id,
                self.permission.value,
                exc_info=exc,
            )
            raise InternalError("Internal server error during authorization check.") from exc

        profile = resolve_permissions(roles)
        if not profile.has(self.permission.value):
            logger.warning(
                "permission_denied user_id=%s permission=%s effective_role=%r",
                user_id,
                self.permission.value,
                profile.effective_role_name,
            )
            raise ForbiddenError(
                f"Access denied. Requires permission: {self.permission.value}",
                details={"required_permission": self.permission.value},
            )
        return profile
