from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.address import AddressCreate, AddressUpdate, UserAddress, DEFAULT_ADDRESS_TYPE
from services.errors import (
    InvalidRequestData,
    PersistenceError,
    UserAddressNotFound,
    classify_address_integrity_error,
)
from services.repository import UserDataAccess
from services.validation import (
    parse_address_id,
    parse_user_id,
    reject_emptied_fields,
    validate_create_address_request,
)

logger = logging.getLogger(__name__)

# address fields a patch may change but not clear
NON_EMPTY_ADDRESS_FIELDS = {
    "address_type": "Address type",
    "address_line_1": "Address line 1",
    "city": "City",
    "state": "State",
    "zip_code": "Zip code",
    "country": "Country",
}


class UserAddressService:
    """Addresses owned by a user."""

    def __init__(self, repository: UserDataAccess):
        self.repository = repository

    async def get_user_addresses(self, user_id: Optional[str]) -> List[UserAddress]:
        """All addresses of a user; an unknown user simply has none."""
        uid = parse_user_id(user_id)

        try:
            addresses = await self.repository.find_addresses_by_user_id(uid)
        except SQLAlchemyError as ex:
            logger.error("Error getting user addresses for user id: %s", user_id, exc_info=True)
            raise PersistenceError(
                f"Find addresses by user id for userId {user_id} failed for unknown reasons"
            ) from ex

        if not addresses:
            logger.warning("No user addresses found for id: %s", user_id)
            return []

        return addresses

    async def get_user_address(
        self, user_id: Optional[str], address_id: Optional[str]
    ) -> UserAddress:
        uid = parse_user_id(user_id)
        aid = parse_address_id(address_id)

        try:
            address = await self.repository.find_address_by_id(aid)
        except SQLAlchemyError as ex:
            logger.error(
                "Error getting user address for user id: %s, address id: %s",
                user_id, address_id, exc_info=True,
            )
            raise PersistenceError(
                f"Find address by id for userId {user_id} and addressId {address_id} "
                f"failed for unknown reasons"
            ) from ex

        # an address owned by someone else is reported the same as a missing one
        if address is None or address.user_id != uid:
            logger.warning("User address not found for address id: %s, user id: %s", address_id, user_id)
            raise UserAddressNotFound(
                f"No user address found for userId {user_id} and addressId {address_id}"
            )

        return address

    async def create_user_address(
        self, user_id: Optional[str], request: Optional[AddressCreate]
    ) -> UserAddress:
        uid = parse_user_id(user_id)
        validate_create_address_request(request)

        address = UserAddress(
            user_id=uid,
            address_type=request.address_type or DEFAULT_ADDRESS_TYPE,
            address_line_1=request.address_line_1,
            address_line_2=request.address_line_2 or None,
            city=request.city,
            state=request.state,
            zip_code=request.zip_code,
            country=request.country,
        )

        try:
            created = await self.repository.create_address(address)
        except IntegrityError as ex:
            error = classify_address_integrity_error(ex, str(user_id))
            logger.error("Error creating user address for user id %s: %s", user_id, error.message)
            raise error from ex
        except SQLAlchemyError as ex:
            logger.error("Error creating user address for user id: %s - %s", user_id, ex)
            raise PersistenceError(f"Error creating user address for user id: {user_id}") from ex

        logger.info("Created address %s for user %s", created.address_id, user_id)
        return created

    async def update_user_address(
        self,
        user_id: Optional[str],
        address_id: Optional[str],
        request: Optional[AddressUpdate],
    ) -> UserAddress:
        parse_user_id(user_id)
        parse_address_id(address_id)

        if request is None:
            logger.error("Request body must be included in Patch User Address request")
            raise InvalidRequestData("Request body must be included in Patch User Address request")

        reject_emptied_fields(request, NON_EMPTY_ADDRESS_FIELDS)

        address = await self.get_user_address(user_id, address_id)

        if not self._apply_updates(request, address):
            logger.info("No changes detected for update user address with id: %s", address_id)
            return address

        try:
            return await self.repository.save_address(address)
        except SQLAlchemyError as ex:
            logger.error(
                "Error updating user address for user id: %s, address id: %s",
                user_id, address_id, exc_info=True,
            )
            raise PersistenceError(
                f"Error updating user address for user id: {user_id}, address id: {address_id}"
            ) from ex

    async def delete_user_address(self, user_id: Optional[str], address_id: Optional[str]) -> None:
        uid = parse_user_id(user_id)
        aid = parse_address_id(address_id)

        try:
            deleted = await self.repository.delete_address(uid, aid)
        except SQLAlchemyError as ex:
            logger.error(
                "Error deleting user address for user id: %s, address id: %s",
                user_id, address_id, exc_info=True,
            )
            raise PersistenceError(
                f"Error deleting user address for user id: {user_id}, address id: {address_id}"
            ) from ex

        if not deleted:
            raise UserAddressNotFound(
                f"No user address found for userId {user_id} and addressId {address_id}"
            )

        logger.info("Deleted %s user address(es) for user id: %s", deleted, user_id)

    @staticmethod
    def _apply_updates(request: AddressUpdate, address: UserAddress) -> bool:
        update_needed = False

        for field in NON_EMPTY_ADDRESS_FIELDS:
            value = getattr(request, field)
            if not value or value == getattr(address, field):
                continue
            setattr(address, field, value)
            update_needed = True

        # address line 2 can be cleared with an empty string
        line_2 = request.address_line_2
        if line_2 is not None and (line_2 or None) != address.address_line_2:
            address.address_line_2 = line_2 or None
            update_needed = True

        return update_needed
