from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional, List
from enum import Enum

from uuid import UUID, uuid4
from pydantic import BaseModel, Field
from sqlalchemy import String, DateTime, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from services.database import Base
from models.hateoas import HATEOASLink, LinkedModel
from models.profile import UserProfile
from models.address import UserAddress, UserAddressRead, AddressCreate

# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------
class UserStatus(str, Enum):
    """Lifecycle status of a user account"""
    ACTIVE = "active"
    INACTIVE = "inactive"
    BANNED = "banned"
    PENDING = "pending"
    DELETED = "deleted"


# -----------------------------------------------------------------------------
# SQLAlchemy Model
# -----------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)

    # both unique; constraint names are matched when classifying conflicts
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    status: Mapped[UserStatus] = mapped_column(
        SQLEnum(UserStatus),
        default=UserStatus.ACTIVE,
        nullable=False,
        index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    profile: Mapped[Optional[UserProfile]] = relationship(
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    addresses: Mapped[List[UserAddress]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        order_by=UserAddress.created_at,
        lazy="selectin",
    )


# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class UserFilter(BaseModel):
    """Optional filters for listing users"""
    username: Optional[str] = Field(None, description="Case-insensitive partial match on username")
    email: Optional[str] = Field(None, description="Case-insensitive partial match on email")
    first_name: Optional[str] = Field(None, description="Case-insensitive partial match on first name")
    last_name: Optional[str] = Field(None, description="Case-insensitive partial match on last name")
    status: Optional[UserStatus] = Field(None, description="Exact account status")


class UserCreate(BaseModel):
    """Create a user with profile and an optional first address.

    Required fields are checked by the service so the error names the field.
    """
    username: Optional[str] = Field(None, max_length=50, examples=["magicalwizardman4848"])
    email: Optional[str] = Field(
        None,
        max_length=255,
        description="User's email address (must be unique)",
        examples=["email@domain.com"]
    )
    password: Optional[str] = Field(
        None,
        max_length=128,
        description="User's password in plain text, stored hashed"
    )
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=50)
    profile_image_url: Optional[str] = Field(None, max_length=2048)
    address: Optional[AddressCreate] = Field(
        None,
        description="Optional first address for the new user"
    )


class UserUpdate(BaseModel):
    """Update user profile information. Username and email cannot change."""
    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=50)
    profile_image_url: Optional[str] = Field(
        None,
        max_length=2048,
        description="Empty string clears the image"
    )


class UserRead(LinkedModel):
    """User data returned to clients, profile fields flattened in"""
    user_id: str = Field(
        ...,
        description="Internal unique identifier for this user"
    )
    username: Optional[str] = None
    email: Optional[str] = None
    status: Optional[UserStatus] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    profile_image_url: Optional[str] = None
    addresses: List[UserAddressRead] = Field(
        default_factory=list,
        description="Addresses owned by this user"
    )
    created_at: Optional[datetime] = Field(
        None,
        description="Timestamp when this user account was created"
    )
    updated_at: Optional[datetime] = Field(
        None,
        description="Timestamp when this user account was last updated"
    )

    @classmethod
    def from_record(
        cls,
        user: User,
        addresses: List[UserAddressRead],
        links: List[HATEOASLink],
    ) -> UserRead:
        profile = user.profile
        return cls(
            user_id=str(user.id),
            username=user.username,
            email=user.email,
            status=user.status,
            first_name=profile.first_name if profile else None,
            last_name=profile.last_name if profile else None,
            phone_number=profile.phone_number if profile else None,
            profile_image_url=profile.profile_image_url if profile else None,
            addresses=addresses,
            created_at=user.created_at,
            updated_at=user.updated_at,
            links=links,
        )
