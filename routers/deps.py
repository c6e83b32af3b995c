from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from services.database import get_db
from services.repository import SqlUserRepository, UserDataAccess
from services.users import UserService
from services.addresses import UserAddressService


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------
def get_repository(db: AsyncSession = Depends(get_db)) -> UserDataAccess:
    return SqlUserRepository(db)


def get_user_service(repository: UserDataAccess = Depends(get_repository)) -> UserService:
    return UserService(repository)


def get_address_service(repository: UserDataAccess = Depends(get_repository)) -> UserAddressService:
    return UserAddressService(repository)
