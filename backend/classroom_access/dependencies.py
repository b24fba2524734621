from collections.abc import AsyncGenerator
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from .auth.identity import default_identity_resolver
from .auth.permissions import Permission
from .config import Settings, get_settings
from .crud.role import RoleRepository
from .crud.user import UserRepository
from .database import get_session
from .domain.invariants import RoleAssignmentValidator
from .domain.ports.role_catalog import RoleCatalog
from .domain.ports.user_directory import UserDirectory
from .domain.roles import EffectivePermissionProfile, UserProfile
from .services.access.authorization_gate import AuthorizationGate
from .services.access.catalog_admin import CatalogService
from .services.access.role_assignment import RoleAssignmentService
from .services.access.user_admin import ProvisioningDefaults, UserAdminService
from .services.access.user_context import UserContextLoader


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


def get_role_catalog(db: AsyncSession = Depends(get_db)) -> RoleCatalog:
    return RoleRepository(db)


def get_user_directory(db: AsyncSession = Depends(get_db)) -> UserDirectory:
    return UserRepository(db)


def get_current_user_id(request: Request) -> int | None:
    return default_identity_resolver.resolve(request)


def get_role_assignment_validator(
    settings: Settings = Depends(get_settings),
) -> RoleAssignmentValidator:
    return RoleAssignmentValidator(settings.unprivileged_threshold)


def get_role_assignment_service(
    catalog: RoleCatalog = Depends(get_role_catalog),
    users: UserDirectory = Depends(get_user_directory),
    validator: RoleAssignmentValidator = Depends(get_role_assignment_validator),
) -> RoleAssignmentService:
    return RoleAssignmentService(catalog, users, validator)


def get_user_context_loader(
    users: UserDirectory = Depends(get_user_directory),
    catalog: RoleCatalog = Depends(get_role_catalog),
) -> UserContextLoader:
    return UserContextLoader(users, catalog)


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_user_admin_service(db: AsyncSession = Depends(get_db)) -> UserAdminService:
    return UserAdminService(db)


def get_provisioning_defaults(request: Request) -> ProvisioningDefaults | None:
    return getattr(request.app.state, "provisioning_defaults", None)


def require_permission(permission: Permission | str) -> Callable:
    """
    Route dependency enforcing a single named permission.

    The gate is built here, when the route is declared, so an unregistered
    permission name fails at import time rather than on the first request.

    Raises (at request time):
        UnauthenticatedError: 401 when the request carries no identity
        ForbiddenError: 403 when the effective permission set lacks it
        InternalError: 500 when the role lookup fails
    """
    gate = AuthorizationGate(permission)

    async def dependency(
        user_id: int | None = Depends(get_current_user_id),
        catalog: RoleCatalog = Depends(get_role_catalog),
    ) -> EffectivePermissionProfile:
        return await gate.check(user_id, catalog)

    return dependency


async def load_user_context(
    request: Request,
    user_id: int | None = Depends(get_current_user_id),
    loader: UserContextLoader = Depends(get_user_context_loader),
) -> UserProfile:
    profile = await loader.load(user_id)
    request.state.current_user = profile
    return profile
