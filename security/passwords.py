from passlib.context import CryptContext


# -----------------------------------------------------------------------------
# Password Hashing
# -----------------------------------------------------------------------------
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plaintext_password: str) -> str:
    """Hash a user's password for storage. Raises ValueError for an empty password."""
    if not plaintext_password:
        raise ValueError("Cannot hash an empty password")
    return pwd_context.hash(plaintext_password)
