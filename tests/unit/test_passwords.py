"""Unit tests for password hashing."""

import pytest

from security import hash_password, pwd_context
from tests.factories import TEST_PASSWORD, TEST_PASSWORD_HASH


class TestPasswords:
    """Test bcrypt hashing through the passlib context."""

    def test_bcrypt_hash(self):
        assert TEST_PASSWORD_HASH.startswith("$2b$")
        assert TEST_PASSWORD_HASH != TEST_PASSWORD

    def test_hash_verifies(self):
        assert pwd_context.verify(TEST_PASSWORD, TEST_PASSWORD_HASH)
        assert not pwd_context.verify("Hey-dol-merry-dol", TEST_PASSWORD_HASH)

    def test_random_salt(self):
        """Test that the same password hashes differently each time."""
        assert hash_password(TEST_PASSWORD) != TEST_PASSWORD_HASH

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            hash_password("")
