"""
Error taxonomy for the service.

Every failure a service or assembler raises is a ServiceError carrying an
ErrorKind. The HTTP layer maps the kind to a status code in one place
(see main.py); nothing below this module knows about HTTP.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from sqlalchemy.exc import IntegrityError


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    LINK_CONSTRUCTION = "link_construction"
    INTERNAL = "internal"


class ServiceError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# -----------------------------------------------------------------------------
# Invalid input
# -----------------------------------------------------------------------------
class InvalidRequestData(ServiceError):
    kind = ErrorKind.INVALID_INPUT


class InvalidUserId(InvalidRequestData):
    def __init__(self, message: str = "Invalid null or empty user id"):
        super().__init__(message)


# -----------------------------------------------------------------------------
# Not found
# -----------------------------------------------------------------------------
class NotFound(ServiceError):
    kind = ErrorKind.NOT_FOUND


class UserNotFound(NotFound):
    def __init__(self, user_id: str):
        super().__init__(f"User with id {user_id} not found")
        self.user_id = user_id


class UserProfileNotFound(NotFound):
    def __init__(self, user_id: str):
        super().__init__(f"User profile not found for user id: {user_id}")
        self.user_id = user_id


class UserAddressNotFound(NotFound):
    pass


# -----------------------------------------------------------------------------
# Conflict / internal
# -----------------------------------------------------------------------------
class UserConflict(ServiceError):
    kind = ErrorKind.CONFLICT


class LinkBuildError(ServiceError):
    kind = ErrorKind.LINK_CONSTRUCTION


class PersistenceError(ServiceError):
    kind = ErrorKind.INTERNAL


# -----------------------------------------------------------------------------
# Integrity error classification
# -----------------------------------------------------------------------------
# Postgres constraint names first, SQLite message fragments second
USERNAME_UNIQUE_PATTERNS = ("users_username_key", "users.username")
EMAIL_UNIQUE_PATTERNS = ("users_email_key", "ix_users_email", "users.email")
ADDRESS_USER_FK_PATTERNS = ("user_addresses_user_id_fkey", "FOREIGN KEY constraint failed")


def _matches(message: str, patterns: tuple[str, ...]) -> bool:
    return any(pattern in message for pattern in patterns)


def classify_user_integrity_error(
    ex: IntegrityError,
    username: Optional[str],
    email: Optional[str],
) -> ServiceError:
    """Map a failed user insert to a conflict naming the duplicated field."""
    message = str(ex.orig) if ex.orig is not None else str(ex)

    if _matches(message, USERNAME_UNIQUE_PATTERNS):
        return UserConflict(f"User with username {username} already exists")
    if _matches(message, EMAIL_UNIQUE_PATTERNS):
        return UserConflict(f"User with email {email} already exists")

    return UserConflict(
        f"Unknown conflict creating user with username: {username}, email {email}"
    )


def classify_address_integrity_error(ex: IntegrityError, user_id: str) -> ServiceError:
    """A dangling user reference means the owning user does not exist."""
    message = str(ex.orig) if ex.orig is not None else str(ex)

    if _matches(message, ADDRESS_USER_FK_PATTERNS):
        return UserNotFound(user_id)

    return UserConflict(f"Unknown conflict creating user address for user id: {user_id}")
