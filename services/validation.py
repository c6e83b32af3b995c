"""Boundary checks run before any persistence call."""
from __future__ import annotations

import logging
from typing import Dict, Optional
from uuid import UUID

from models.address import AddressCreate
from services.errors import InvalidRequestData, InvalidUserId

logger = logging.getLogger(__name__)


def is_blank(value: Optional[str]) -> bool:
    return value is None or value == ""


def parse_user_id(user_id: Optional[str]) -> UUID:
    if user_id is None or str(user_id).strip() == "":
        raise InvalidUserId()
    try:
        return UUID(str(user_id))
    except ValueError:
        raise InvalidUserId(f"Invalid user id: {user_id}")


def parse_address_id(address_id: Optional[str]) -> UUID:
    if address_id is None or str(address_id).strip() == "":
        raise InvalidRequestData("Invalid null or empty address id")
    try:
        return UUID(str(address_id))
    except ValueError:
        raise InvalidRequestData(f"Invalid address id: {address_id}")


def validate_create_address_request(request: Optional[AddressCreate]) -> None:
    if request is None:
        logger.error("Request body must be included in Create User Address request")
        raise InvalidRequestData("Request body must be included in Create User Address request")

    for field, label in (
        ("address_line_1", "Address line 1"),
        ("city", "City"),
        ("state", "State"),
        ("zip_code", "Zip code"),
        ("country", "Country"),
    ):
        if is_blank(getattr(request, field)):
            logger.error("%s must be included in create user address request", label)
            raise InvalidRequestData(f"{label} must be included in create user address request")


def reject_emptied_fields(request, fields: Dict[str, str]) -> None:
    """Fail a patch that sets any of ``fields`` (attribute -> label) to an empty string."""
    for field, label in fields.items():
        if getattr(request, field) == "":
            logger.error("%s cannot be empty", label)
            raise InvalidRequestData(f"{label} cannot be empty")
