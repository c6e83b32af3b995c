from __future__ import annotations

from math import ceil
from typing import List, Optional, Protocol, Tuple
from uuid import UUID

from sqlalchemy import select, func, delete, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models.user import User, UserFilter
from models.profile import UserProfile
from models.address import UserAddress
from models.page import PageDescriptor
from services.errors import InvalidRequestData


# -----------------------------------------------------------------------------
# Data-access interface
# -----------------------------------------------------------------------------
class UserDataAccess(Protocol):
    """What the services need from persistence. Lookups return None when absent."""

    async def find_user_by_id(self, user_id: UUID) -> Optional[User]: ...

    async def find_profile_by_user_id(self, user_id: UUID) -> Optional[UserProfile]: ...

    async def find_addresses_by_user_id(self, user_id: UUID) -> List[UserAddress]: ...

    async def find_address_by_id(self, address_id: UUID) -> Optional[UserAddress]: ...

    async def find_users_page(
        self, user_filter: UserFilter, page: int, size: int
    ) -> Tuple[List[User], PageDescriptor]: ...

    async def create_user(
        self, user: User, profile: UserProfile, address: Optional[UserAddress]
    ) -> User: ...

    async def save_user(self, user: User) -> User: ...

    async def delete_user(self, user_id: UUID) -> int: ...

    async def create_address(self, address: UserAddress) -> UserAddress: ...

    async def save_address(self, address: UserAddress) -> UserAddress: ...

    async def delete_address(self, user_id: UUID, address_id: UUID) -> int: ...


# -----------------------------------------------------------------------------
# SQLAlchemy implementation
# -----------------------------------------------------------------------------
class SqlUserRepository:
    """UserDataAccess backed by an AsyncSession (one per request)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ---- reads ----

    async def find_user_by_id(self, user_id: UUID) -> Optional[User]:
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .options(selectinload(User.profile), selectinload(User.addresses))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_profile_by_user_id(self, user_id: UUID) -> Optional[UserProfile]:
        result = await self.db.execute(
            select(UserProfile).where(UserProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def find_addresses_by_user_id(self, user_id: UUID) -> List[UserAddress]:
        result = await self.db.execute(
            select(UserAddress)
            .where(UserAddress.user_id == user_id)
            .order_by(UserAddress.created_at)
        )
        return list(result.scalars().all())

    async def find_address_by_id(self, address_id: UUID) -> Optional[UserAddress]:
        result = await self.db.execute(
            select(UserAddress).where(UserAddress.address_id == address_id)
        )
        return result.scalar_one_or_none()

    async def find_users_page(
        self, user_filter: UserFilter, page: int, size: int
    ) -> Tuple[List[User], PageDescriptor]:
        base_query = select(User).outerjoin(UserProfile, UserProfile.user_id == User.id)

        # Apply filters
        filters = []
        if user_filter.username:
            filters.append(User.username.ilike(f"%{user_filter.username}%"))
        if user_filter.email:
            filters.append(User.email.ilike(f"%{user_filter.email}%"))
        if user_filter.first_name:
            filters.append(UserProfile.first_name.ilike(f"%{user_filter.first_name}%"))
        if user_filter.last_name:
            filters.append(UserProfile.last_name.ilike(f"%{user_filter.last_name}%"))
        if user_filter.status is not None:
            filters.append(User.status == user_filter.status)

        if filters:
            base_query = base_query.where(and_(*filters))

        # ---- total count (before pagination) ----
        count_stmt = select(func.count()).select_from(base_query.subquery())
        total_result = await self.db.execute(count_stmt)
        total = total_result.scalar_one() or 0

        total_pages = ceil(total / size) if total > 0 else 0

        if total_pages > 0 and page >= total_pages:
            raise InvalidRequestData(
                f"Page {page} is out of range for {total_pages} total pages"
            )

        # ---- apply pagination ----
        data_query = (
            base_query
            .options(selectinload(User.profile), selectinload(User.addresses))
            .order_by(User.created_at, User.id)
            .offset(page * size)
            .limit(size)
        )
        result = await self.db.execute(data_query)
        users = list(result.scalars().all())

        descriptor = PageDescriptor(
            page_number=page,
            page_size=size,
            total_pages=total_pages,
            total_elements=total,
        )
        return users, descriptor

    # ---- writes ----

    async def create_user(
        self, user: User, profile: UserProfile, address: Optional[UserAddress]
    ) -> User:
        # user, profile and address commit together or not at all
        user.profile = profile
        if address is not None:
            user.addresses.append(address)

        self.db.add(user)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return await self.find_user_by_id(user.id)

    async def save_user(self, user: User) -> User:
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return await self.find_user_by_id(user.id)

    async def delete_user(self, user_id: UUID) -> int:
        user = await self.find_user_by_id(user_id)
        if user is None:
            return 0

        await self.db.delete(user)
        await self.db.commit()
        return 1

    async def create_address(self, address: UserAddress) -> UserAddress:
        self.db.add(address)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(address)
        return address

    async def save_address(self, address: UserAddress) -> UserAddress:
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(address)
        return address

    async def delete_address(self, user_id: UUID, address_id: UUID) -> int:
        result = await self.db.execute(
            delete(UserAddress).where(
                UserAddress.user_id == user_id,
                UserAddress.address_id == address_id,
            )
        )
        await self.db.commit()
        return result.rowcount
