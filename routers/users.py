from fastapi import APIRouter, Depends, Query, Request, Response
from typing import Optional

from models.user import UserCreate, UserFilter, UserRead, UserStatus, UserUpdate
from models.page import UsersPageRead
from services.users import UserService
from routers.deps import get_user_service
from utils.hateoas import hateoas_user, hateoas_users_page


router = APIRouter(
    prefix="/v1/users",
    tags=["Users"],
)


# -----------------------------------------------------------------------------
# POST Endpoint
# -----------------------------------------------------------------------------

# Create new user with profile and optional first address
@router.post("", response_model=UserRead, response_model_exclude_none=True, status_code=201, name="create_user")
async def create_user(
    request: Request,
    user: UserCreate,
    service: UserService = Depends(get_user_service),
):
    created = await service.create_user(user)
    return hateoas_user(created, str(request.base_url))

# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=UsersPageRead, response_model_exclude_none=True, status_code=200, name="list_users")
async def list_users(
    request: Request,
    # Pagination
    page: int = Query(0, ge=0, description="Page number (0-based)"),
    size: Optional[int] = Query(None, ge=1, description="Page size"),
    # Filters
    username: Optional[str] = Query(None, description="Filter by username (partial match)"),
    email: Optional[str] = Query(None, description="Filter by email (partial match)"),
    first_name: Optional[str] = Query(None, description="Filter by first name (partial match)"),
    last_name: Optional[str] = Query(None, description="Filter by last name (partial match)"),
    status: Optional[UserStatus] = Query(None, description="Filter by account status"),
    service: UserService = Depends(get_user_service),
):
    user_filter = UserFilter(
        username=username,
        email=email,
        first_name=first_name,
        last_name=last_name,
        status=status,
    )
    users, page_descriptor = await service.list_users(user_filter, page, size)
    return hateoas_users_page(users, page_descriptor, str(request.base_url))


@router.get("/{user_id}", response_model=UserRead, response_model_exclude_none=True, status_code=200, name="get_user")
async def get_user(
    request: Request,
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    user = await service.get_user(user_id)
    return hateoas_user(user, str(request.base_url))

# -----------------------------------------------------------------------------
# PATCH Endpoint
# -----------------------------------------------------------------------------

@router.patch("/{user_id}", response_model=UserRead, response_model_exclude_none=True, status_code=200, name="update_user")
async def update_user(
    request: Request,
    user_id: str,
    user_update: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    user = await service.update_user(user_id, user_update)
    return hateoas_user(user, str(request.base_url))

# -----------------------------------------------------------------------------
# DELETE Endpoint
# -----------------------------------------------------------------------------

@router.delete("/{user_id}", status_code=204, name="delete_user")
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    await service.delete_user(user_id)
    return Response(status_code=204)
