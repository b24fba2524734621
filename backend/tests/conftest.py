"""Shared test fixtures and configuration."""
import os
import tempfile

import pytest

# Required at import time by classroom_access.config / classroom_access.database
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///" + os.path.join(tempfile.gettempdir(), "classroom_access_test.db"),
)

from classroom_access.domain.roles import UserRecord  # noqa: E402
from tests.access_helpers import FakeRoleCatalog, FakeUserDirectory  # noqa: E402


@pytest.fixture
def catalog() -> FakeRoleCatalog:
    return FakeRoleCatalog()


@pytest.fixture
def alice() -> UserRecord:
    return UserRecord(id=10, email="alice@example.edu", name="Alice", group_id=1, group_name="Unassigned")


@pytest.fixture
def user_directory(alice: UserRecord) -> FakeUserDirectory:
    return FakeUserDirectory(alice)


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'access.db'}"


@pytest.fixture
def anyio_backend() -> str:
    # The SQLAlchemy asyncio / aiosqlite stack runs on asyncio only.
    return "asyncio"
