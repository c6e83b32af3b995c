from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from config.settings import settings
from models.user import User, UserCreate, UserFilter, UserStatus, UserUpdate
from models.profile import UserProfile
from models.address import UserAddress, DEFAULT_ADDRESS_TYPE
from models.page import PageDescriptor
from security import hash_password
from services.errors import (
    InvalidRequestData,
    PersistenceError,
    UserNotFound,
    UserProfileNotFound,
    classify_user_integrity_error,
)
from services.repository import UserDataAccess
from services.validation import (
    is_blank,
    parse_user_id,
    reject_emptied_fields,
    validate_create_address_request,
)

logger = logging.getLogger(__name__)

# profile fields a patch may change but not clear
NON_EMPTY_PROFILE_FIELDS = {
    "first_name": "First name",
    "last_name": "Last name",
    "phone_number": "Phone number",
}


# -----------------------------------------------------------------------------
# User service
# -----------------------------------------------------------------------------
class UserService:
    """Users and their profiles. Validates before touching persistence."""

    def __init__(self, repository: UserDataAccess):
        self.repository = repository

    async def get_user(self, user_id: Optional[str]) -> User:
        uid = parse_user_id(user_id)

        try:
            user = await self.repository.find_user_by_id(uid)
        except SQLAlchemyError as ex:
            logger.error("Error getting user for user id: %s", user_id, exc_info=True)
            raise PersistenceError(
                f"Find user by id for user id {user_id} failed for unknown reasons"
            ) from ex

        if user is None:
            logger.warning("User not found for id: %s", user_id)
            raise UserNotFound(str(user_id))

        return user

    async def list_users(
        self,
        user_filter: UserFilter,
        page: int = 0,
        size: Optional[int] = None,
    ) -> Tuple[List[User], PageDescriptor]:
        size = settings.DEFAULT_PAGE_SIZE if size is None else size

        if page < 0:
            raise InvalidRequestData("Page index must not be negative")
        if size < 1 or size > settings.MAX_PAGE_SIZE:
            raise InvalidRequestData(
                f"Page size must be between 1 and {settings.MAX_PAGE_SIZE}"
            )

        try:
            return await self.repository.find_users_page(user_filter, page, size)
        except SQLAlchemyError as ex:
            logger.error("Error getting users page %s (size %s)", page, size, exc_info=True)
            raise PersistenceError(
                f"Find users page {page} with size {size} failed for unknown reasons"
            ) from ex

    async def get_user_profile(self, user_id: Optional[str]) -> UserProfile:
        uid = parse_user_id(user_id)

        try:
            profile = await self.repository.find_profile_by_user_id(uid)
        except SQLAlchemyError as ex:
            logger.error("Error getting user profile for user id: %s", user_id, exc_info=True)
            raise PersistenceError(
                f"Find user profile by id for userId {user_id} failed for unknown reasons"
            ) from ex

        if profile is None:
            logger.warning("User profile not found for id: %s", user_id)
            raise UserProfileNotFound(str(user_id))

        return profile

    async def create_user(self, request: Optional[UserCreate]) -> User:
        self._validate_create_user_request(request)

        user = User(
            username=request.username,
            email=request.email,
            password_hash=hash_password(request.password),
            status=UserStatus.ACTIVE,
        )
        profile = UserProfile(
            first_name=request.first_name,
            last_name=request.last_name,
            phone_number=request.phone_number,
            profile_image_url=request.profile_image_url or None,
        )

        address = None
        if request.address is not None:
            body = request.address
            address = UserAddress(
                address_type=body.address_type or DEFAULT_ADDRESS_TYPE,
                address_line_1=body.address_line_1,
                address_line_2=body.address_line_2 or None,
                city=body.city,
                state=body.state,
                zip_code=body.zip_code,
                country=body.country,
            )

        try:
            created = await self.repository.create_user(user, profile, address)
        except IntegrityError as ex:
            error = classify_user_integrity_error(ex, request.username, request.email)
            logger.error(error.message)
            raise error from ex
        except SQLAlchemyError as ex:
            logger.error("Error creating new user: %s - %s", request.username, ex)
            raise PersistenceError(f"Error creating new user {request.username}") from ex

        logger.info("Created user %s (%s)", created.id, created.username)
        return created

    async def update_user(self, user_id: Optional[str], request: Optional[UserUpdate]) -> User:
        uid = parse_user_id(user_id)

        if request is None:
            raise InvalidRequestData("Request body must be included in Patch User request")

        if not is_blank(request.email) or not is_blank(request.username):
            raise InvalidRequestData("Cannot change username or email")

        reject_emptied_fields(request, NON_EMPTY_PROFILE_FIELDS)

        user = await self.get_user(str(uid))

        if not self._apply_updates(request, user):
            logger.info("No changes detected for update user with id: %s", user_id)
            return user

        try:
            return await self.repository.save_user(user)
        except SQLAlchemyError as ex:
            logger.error("Error updating user with id: %s", user_id, exc_info=True)
            raise PersistenceError(
                f"Update user by id for user id {user_id} failed for unknown reasons"
            ) from ex

    async def delete_user(self, user_id: Optional[str]) -> None:
        uid = parse_user_id(user_id)

        try:
            deleted = await self.repository.delete_user(uid)
        except SQLAlchemyError as ex:
            logger.error("Error deleting user with id: %s", user_id, exc_info=True)
            raise PersistenceError(
                f"Delete user by id for user id {user_id} failed for unknown reasons"
            ) from ex

        if not deleted:
            logger.warning("Cannot delete missing user: %s", user_id)
            raise UserNotFound(str(user_id))

        logger.info("Deleted user %s", user_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    @staticmethod
    def _validate_create_user_request(request: Optional[UserCreate]) -> None:
        if request is None:
            raise InvalidRequestData("Request body must be included")

        required = (
            ("username", "Username"),
            ("email", "Email"),
            ("first_name", "First name"),
            ("last_name", "Last name"),
            ("password", "Password"),
            ("phone_number", "Phone number"),
        )
        for field, label in required:
            if is_blank(getattr(request, field)):
                raise InvalidRequestData(f"{label} must be included")

        if request.address is not None:
            validate_create_address_request(request.address)

    @staticmethod
    def _apply_updates(request: UserUpdate, user: User) -> bool:
        """Copy changed fields onto the user's profile. Returns True if anything changed."""
        profile = user.profile
        if profile is None:
            raise UserProfileNotFound(str(user.id))

        update_needed = False

        for field in NON_EMPTY_PROFILE_FIELDS:
            value = getattr(request, field)
            if not value or value == getattr(profile, field):
                continue
            setattr(profile, field, value)
            update_needed = True

        # image url may be cleared with an empty string
        image_url = request.profile_image_url
        if image_url is not None and (image_url or None) != profile.profile_image_url:
            profile.profile_image_url = image_url or None
            update_needed = True

        return update_needed
