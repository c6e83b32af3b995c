from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional, List

from uuid import UUID, uuid4
from pydantic import BaseModel, Field
from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from services.database import Base
from models.hateoas import HATEOASLink, LinkedModel

DEFAULT_ADDRESS_TYPE = "home"

# -----------------------------------------------------------------------------
# SQLAlchemy Model
# -----------------------------------------------------------------------------
class UserAddress(Base):
    __tablename__ = "user_addresses"

    address_id: Mapped[UUID] = mapped_column("id", primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # billing, shipping, home, etc.
    address_type: Mapped[str] = mapped_column(String(50), default=DEFAULT_ADDRESS_TYPE, nullable=False)

    address_line_1: Mapped[str] = mapped_column(String(255), nullable=False)
    address_line_2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    user = relationship("User", back_populates="addresses")


# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class AddressCreate(BaseModel):
    """Address fields for a new address; required fields are checked by the service"""
    address_type: Optional[str] = Field(
        None,
        max_length=50,
        description="Free-form address type (billing, shipping, home, ...). Defaults to 'home'",
        examples=["home"]
    )
    address_line_1: Optional[str] = Field(None, max_length=255, description="First address line")
    address_line_2: Optional[str] = Field(None, max_length=255, description="Second address line")
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)


class AddressUpdate(BaseModel):
    """Partial address update. An empty address_line_2 clears it."""
    address_type: Optional[str] = Field(None, max_length=50)
    address_line_1: Optional[str] = Field(None, max_length=255)
    address_line_2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)


class UserAddressRead(LinkedModel):
    """Address data returned to clients"""
    address_id: str = Field(..., description="Unique identifier for this address")
    user_id: str = Field(..., description="ID of the user who owns this address")
    address_type: Optional[str] = None
    address_line_1: Optional[str] = None
    address_line_2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, address: UserAddress, user_id: str, links: List[HATEOASLink]) -> UserAddressRead:
        return cls(
            address_id=str(address.address_id),
            user_id=user_id,
            address_type=address.address_type,
            address_line_1=address.address_line_1,
            address_line_2=address.address_line_2,
            city=address.city,
            state=address.state,
            zip_code=address.zip_code,
            country=address.country,
            created_at=address.created_at,
            updated_at=address.updated_at,
            links=links,
        )


class UserAddressesRead(LinkedModel):
    """All addresses of one user"""
    user_id: str = Field(..., description="ID of the user who owns these addresses")
    addresses: List[UserAddressRead] = Field(default_factory=list)
