from fastapi import APIRouter, Depends, Request, Response

from models.address import AddressCreate, AddressUpdate, UserAddressRead, UserAddressesRead
from services.addresses import UserAddressService
from services.validation import parse_user_id
from routers.deps import get_address_service
from utils.hateoas import hateoas_address, hateoas_addresses


router = APIRouter(
    prefix="/v1/users/{user_id}/addresses",
    tags=["User Addresses"],
)


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("", response_model=UserAddressesRead, response_model_exclude_none=True, status_code=200, name="list_user_addresses")
async def list_user_addresses(
    request: Request,
    user_id: str,
    service: UserAddressService = Depends(get_address_service),
):
    """All addresses of a user (empty list when there are none)"""
    addresses = await service.get_user_addresses(user_id)
    return hateoas_addresses(str(parse_user_id(user_id)), addresses, str(request.base_url))


@router.get("/{address_id}", response_model=UserAddressRead, response_model_exclude_none=True, status_code=200, name="get_user_address")
async def get_user_address(
    request: Request,
    user_id: str,
    address_id: str,
    service: UserAddressService = Depends(get_address_service),
):
    address = await service.get_user_address(user_id, address_id)
    return hateoas_address(address, address.user_id, str(request.base_url))

# -----------------------------------------------------------------------------
# POST/PATCH Endpoints
# -----------------------------------------------------------------------------

@router.post("", response_model=UserAddressRead, response_model_exclude_none=True, status_code=201, name="create_user_address")
async def create_user_address(
    request: Request,
    user_id: str,
    address: AddressCreate,
    service: UserAddressService = Depends(get_address_service),
):
    created = await service.create_user_address(user_id, address)
    return hateoas_address(created, created.user_id, str(request.base_url))


@router.patch("/{address_id}", response_model=UserAddressRead, response_model_exclude_none=True, status_code=200, name="update_user_address")
async def update_user_address(
    request: Request,
    user_id: str,
    address_id: str,
    address_update: AddressUpdate,
    service: UserAddressService = Depends(get_address_service),
):
    address = await service.update_user_address(user_id, address_id, address_update)
    return hateoas_address(address, address.user_id, str(request.base_url))

# -----------------------------------------------------------------------------
# DELETE Endpoint
# -----------------------------------------------------------------------------

@router.delete("/{address_id}", status_code=204, name="delete_user_address")
async def delete_user_address(
    user_id: str,
    address_id: str,
    service: UserAddressService = Depends(get_address_service),
):
    await service.delete_user_address(user_id, address_id)
    return Response(status_code=204)
