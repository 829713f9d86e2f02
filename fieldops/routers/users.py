"""API Router for the current user."""
from fastapi import APIRouter, Depends

from fieldops.models.user import UserResponse
from fieldops.routers.deps import get_current_user

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get the authenticated user with their role and regions."""
    return UserResponse.model_validate({**user, 'assignedRegions': user.get('assignedRegions') or []})
