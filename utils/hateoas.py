import logging
from typing import List, Optional, Sequence

from models.user import User, UserRead
from models.profile import UserProfile, UserProfileRead
from models.address import UserAddress, UserAddressRead, UserAddressesRead
from models.page import PageDescriptor, UsersPageRead
from services.errors import InvalidRequestData, InvalidUserId, LinkBuildError
from utils.links import (
    build_user_links,
    build_user_profile_links,
    build_address_links,
    build_addresses_links,
    build_page_links,
)

logger = logging.getLogger(__name__)


def _require_user_id(user_id) -> str:
    if user_id is None or str(user_id) == "":
        raise InvalidUserId()
    return str(user_id)


def _require_address_id(address_id) -> str:
    if address_id is None or str(address_id) == "":
        raise InvalidRequestData("Invalid null or empty address id")
    return str(address_id)


# -----------------------------------------------------------------------------
# User addresses HATEOAS
# -----------------------------------------------------------------------------
def hateoas_address(address: UserAddress, user_id, base_url: str = "") -> UserAddressRead:
    user_id = _require_user_id(user_id)
    address_id = _require_address_id(address.address_id)

    try:
        links = build_address_links(user_id, address_id, base_url)
    except LinkBuildError as e:
        logger.error("Error creating links for address %s of user %s: %s", address_id, user_id, e)
        raise

    return UserAddressRead.from_record(address, user_id, links)


def hateoas_addresses(
    user_id,
    addresses: Optional[Sequence[UserAddress]],
    base_url: str = "",
) -> UserAddressesRead:
    user_id = _require_user_id(user_id)

    try:
        links = build_addresses_links(user_id, base_url)
    except LinkBuildError as e:
        logger.error("Error creating links for addresses of user %s: %s", user_id, e)
        raise

    return UserAddressesRead(
        user_id=user_id,
        addresses=[hateoas_address(a, user_id, base_url) for a in addresses or []],
        links=links,
    )


# -----------------------------------------------------------------------------
# User HATEOAS
# -----------------------------------------------------------------------------
def hateoas_user(user: User, base_url: str = "") -> UserRead:
    user_id = _require_user_id(user.id)

    try:
        links = build_user_links(user_id, base_url)
    except LinkBuildError as e:
        logger.error("Error creating links for user %s: %s", user_id, e)
        raise

    addresses: List[UserAddressRead] = [
        hateoas_address(a, user_id, base_url) for a in user.addresses or []
    ]
    return UserRead.from_record(user, addresses, links)


def hateoas_user_profile(profile: UserProfile, base_url: str = "") -> UserProfileRead:
    user_id = _require_user_id(profile.user_id)

    try:
        links = build_user_profile_links(user_id, base_url)
    except LinkBuildError as e:
        logger.error("Error creating links for profile of user %s: %s", user_id, e)
        raise

    return UserProfileRead.from_record(profile, links)


# -----------------------------------------------------------------------------
# Users page HATEOAS
# -----------------------------------------------------------------------------
def hateoas_users_page(
    users: Sequence[User],
    page: PageDescriptor,
    base_url: str = "",
) -> UsersPageRead:
    try:
        links = build_page_links(page.page_number, page.page_size, page.total_pages, base_url)
    except LinkBuildError as e:
        logger.error("Error creating pagination links for page %s: %s", page.page_number, e)
        raise

    return UsersPageRead(
        users=[hateoas_user(u, base_url) for u in users],
        page=page,
        links=links,
    )
