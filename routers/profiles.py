from fastapi import APIRouter, Depends, Request

from models.profile import UserProfileRead
from services.users import UserService
from routers.deps import get_user_service
from utils.hateoas import hateoas_user_profile


router = APIRouter(
    prefix="/v1/users/{user_id}/profile",
    tags=["User Profiles"],
)


@router.get("", response_model=UserProfileRead, response_model_exclude_none=True, status_code=200, name="get_user_profile")
async def get_user_profile(
    request: Request,
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    """Get the profile of a specific user"""
    profile = await service.get_user_profile(user_id)
    return hateoas_user_profile(profile, str(request.base_url))
