from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional, List

from uuid import UUID
from pydantic import Field
from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from services.database import Base
from models.hateoas import HATEOASLink, LinkedModel

# -----------------------------------------------------------------------------
# SQLAlchemy Model
# -----------------------------------------------------------------------------
class UserProfile(Base):
    __tablename__ = "user_profiles"

    # one profile per user, keyed by the owning user
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True
    )

    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(50), nullable=False)
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    user = relationship("User", back_populates="profile")


# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------
class UserProfileRead(LinkedModel):
    """Profile data returned to clients"""
    user_id: str = Field(
        ...,
        description="ID of the user this profile belongs to"
    )
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = Field(
        None,
        description="Timestamp when this profile was created"
    )
    updated_at: Optional[datetime] = Field(
        None,
        description="Timestamp when this profile was last updated"
    )

    @classmethod
    def from_record(cls, profile: UserProfile, links: List[HATEOASLink]) -> UserProfileRead:
        return cls(
            user_id=str(profile.user_id),
            first_name=profile.first_name,
            last_name=profile.last_name,
            phone_number=profile.phone_number,
            profile_image_url=profile.profile_image_url,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
            links=links,
        )
