from __future__ import annotations
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.hateoas import LinkedModel
from models.user import UserRead


class PageDescriptor(BaseModel):
    """Position of one page within a paginated listing (zero-based)"""
    page_number: int = Field(..., ge=0, description="Zero-based page index")
    page_size: int = Field(..., ge=1, description="Maximum number of items per page")
    total_pages: int = Field(..., ge=0)
    total_elements: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def page_within_total(self):
        if self.total_pages > 0 and self.page_number >= self.total_pages:
            raise ValueError(
                f"page_number {self.page_number} is out of range for {self.total_pages} total pages"
            )
        return self


class UsersPageRead(LinkedModel):
    """One page of users with pagination links"""
    users: List[UserRead] = Field(default_factory=list)
    page: PageDescriptor
