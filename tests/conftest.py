"""Test configuration and fixtures for the user service."""
import os

# settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["INIT_DB"] = "false"

import pytest
from fastapi.testclient import TestClient

from main import app
from routers.deps import get_repository
from tests.factories import FakeUserRepository, make_address, make_user


@pytest.fixture
def repository() -> FakeUserRepository:
    """Empty in-memory repository."""
    return FakeUserRepository()


@pytest.fixture
def seeded_repository() -> FakeUserRepository:
    """Repository holding Tom Bombadil with one address."""
    return FakeUserRepository([make_user(addresses=[make_address()])])


@pytest.fixture(name="client")
def client_fixture(seeded_repository: FakeUserRepository):
    """Test client backed by the seeded in-memory repository."""
    app.dependency_overrides[get_repository] = lambda: seeded_repository
    yield TestClient(app)
    app.dependency_overrides.clear()
