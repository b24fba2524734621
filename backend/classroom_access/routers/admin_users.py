from fastapi import APIRouter, Depends, Path, status

from ..auth.permissions import Permission
from ..dependencies import (
    get_provisioning_defaults,
    get_role_assignment_service,
    get_user_admin_service,
    require_permission,
)
from ..schemas.group import GroupAssignmentRequest
from ..schemas.role import RoleAssignmentRequest, RoleAssignmentResponse, RoleGrantResponse
from ..schemas.user import UserProvisionRequest, UserResponse
from ..services.access.role_assignment import RoleAssignmentService
from ..services.access.user_admin import ProvisioningDefaults, UserAdminService

router = APIRouter(prefix="/api/admin/users", tags=["admin-users"])


@router.put(
    "/{user_id}/roles",
    response_model=RoleAssignmentResponse,
    dependencies=[Depends(require_permission(Permission.ASSIGN_ROLES))],
)
async def assign_roles(
    payload: RoleAssignmentRequest,
    user_id: int = Path(...),
    service: RoleAssignmentService = Depends(get_role_assignment_service),
) -> RoleAssignmentResponse:
    """
    Replace every role of a user.

    Requires: ASSIGN_ROLES

    At most one privileged role may be given, and all roles must share one
    privilege level. On any rejection the stored roles are unchanged.
    """
    roles = await service.validate_and_assign(user_id, payload.role_ids)
    return RoleAssignmentResponse(
        message="User roles updated successfully.",
        user_id=user_id,
        roles=[RoleGrantResponse.model_validate(role) for role in roles],
    )


@router.put(
    "/{user_id}/group",
    response_model=UserResponse,
    dependencies=[Depends(require_permission(Permission.ASSIGN_GROUPS))],
)
async def assign_group(
    payload: GroupAssignmentRequest,
    user_id: int = Path(...),
    service: UserAdminService = Depends(get_user_admin_service),
) -> UserResponse:
    """Move a user into a group, or out of every group with ``null``."""
    record = await service.assign_group(user_id, payload.group_id)
    return UserResponse.model_validate(record)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission(Permission.PROVISION_USERS))],
)
async def provision_user(
    payload: UserProvisionRequest,
    service: UserAdminService = Depends(get_user_admin_service),
    defaults: ProvisioningDefaults | None = Depends(get_provisioning_defaults),
) -> UserResponse:
    record = await service.provision_user(payload.email, payload.name, defaults)
    return UserResponse.model_validate(record)
