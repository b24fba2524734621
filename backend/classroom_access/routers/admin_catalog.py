from fastapi import APIRouter, Depends, Path, status

from ..auth.permissions import Permission
from ..dependencies import get_catalog_service, require_permission
from ..schemas.group import GroupCreate, GroupResponse
from ..schemas.role import RoleCreate, RolePermissionsUpdate, RoleResponse
from ..services.access.catalog_admin import CatalogService

router = APIRouter(prefix="/api/admin", tags=["admin-catalog"])

require_provisioning = require_permission(Permission.PROVISION_USERS)


@router.get(
    "/roles",
    response_model=list[RoleResponse],
    dependencies=[Depends(require_permission(Permission.ASSIGN_ROLES))],
)
async def list_roles(
    service: CatalogService = Depends(get_catalog_service),
) -> list[RoleResponse]:
    """All roles ordered by privilege level, with their permission names."""
    roles = await service.list_roles()
    return [RoleResponse.model_validate(role) for role in roles]


@router.post(
    "/groups",
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_provisioning)],
)
async def create_group(
    payload: GroupCreate,
    service: CatalogService = Depends(get_catalog_service),
) -> GroupResponse:
    group = await service.create_group(
        payload.name,
        logo_url=payload.logo_url,
        slack_link=payload.slack_link,
        repo_link=payload.repo_link,
    )
    return GroupResponse.model_validate(group)


@router.post(
    "/roles",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_provisioning)],
)
async def create_role(
    payload: RoleCreate,
    service: CatalogService = Depends(get_catalog_service),
) -> RoleResponse:
    role = await service.create_role(
        payload.name, payload.privilege_level, description=payload.description
    )
    return RoleResponse.model_validate(role)


@router.put(
    "/roles/{role_id}/permissions",
    response_model=RoleResponse,
    dependencies=[Depends(require_provisioning)],
)
async def set_role_permissions(
    payload: RolePermissionsUpdate,
    role_id: int = Path(...),
    service: CatalogService = Depends(get_catalog_service),
) -> RoleResponse:
    """Replace the complete permission list of a role.

    Names outside the permission registry are rejected with 400; registered
    names that were never seeded yield 404.
    """
    role = await service.set_role_permissions(role_id, payload.permissions)
    return RoleResponse.model_validate(role)
