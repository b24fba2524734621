from fastapi import APIRouter, Depends

from ..dependencies import load_user_context
from ..domain.roles import UserProfile
from ..schemas.role import RoleGrantResponse
from ..schemas.user import UserContextResponse, UserResponse

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserContextResponse)
async def read_current_user(
    profile: UserProfile = Depends(load_user_context),
) -> UserContextResponse:
    return UserContextResponse(
        user=UserResponse.model_validate(profile.user),
        roles=[RoleGrantResponse.model_validate(role) for role in profile.roles],
        effective_role_name=profile.effective.effective_role_name,
        permissions=sorted(profile.permissions),
    )
