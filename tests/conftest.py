"""
Pytest configuration and fixtures for CloudFolders tests.

Every test gets a fresh in-memory SQLite database (aiosqlite, foreign keys
on). API tests drive the FastAPI app through httpx's ASGI transport with
the database and blob storage dependencies pointed at test instances.
"""
import os
import logging
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Settings are read at import time by cloudfolders.main
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-0123456789")
os.environ.setdefault("PUBLIC_BASE_URL", "http://test")
os.environ.setdefault("DEBUG", "false")

from cloudfolders import models_auth  # noqa: E402,F401
from cloudfolders.api.v1.folders import get_storage_service  # noqa: E402
from cloudfolders.auth.jwt_handler import create_access_token  # noqa: E402
from cloudfolders.auth.passwords import hash_password  # noqa: E402
from cloudfolders.config import get_settings  # noqa: E402
from cloudfolders.database import enable_sqlite_pragmas, get_db_session  # noqa: E402
from cloudfolders.main import app  # noqa: E402
from cloudfolders.models import Base  # noqa: E402
from cloudfolders.models_auth import User  # noqa: E402
from cloudfolders.storage import BlobStorageService, StorageConfig  # noqa: E402

logger = logging.getLogger(__name__)

TEST_PASSWORD = "secret1"


# ============================================
# Settings
# ============================================

@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Re-read settings per test so monkeypatched env vars take effect."""
    get_settings.cache_clear()
    # bcrypt at full cost makes the suite crawl
    monkeypatch.setattr("cloudfolders.auth.passwords._ROUNDS", 4)
    yield
    get_settings.cache_clear()


# ============================================
# Database
# ============================================

@pytest.fixture
async def db_engine():
    """In-memory async engine shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_pragmas(engine, wal=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A session on the test database. Tests commit explicitly."""
    async with session_factory() as session:
        yield session


async def make_user(session: AsyncSession, username: str) -> User:
    user = User(username=username, password_hash=hash_password(TEST_PASSWORD))
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
async def user(db_session) -> User:
    return await make_user(db_session, "alice")


@pytest.fixture
async def other_user(db_session) -> User:
    return await make_user(db_session, "bob")


# ============================================
# HTTP
# ============================================

@pytest.fixture
def blob_root(tmp_path):
    return tmp_path / "blobs"


@pytest.fixture
def storage_service(blob_root) -> BlobStorageService:
    """Local blob storage under tmp_path."""
    return BlobStorageService.from_config(
        StorageConfig(local_root=str(blob_root), public_base_url="http://test")
    )


@pytest.fixture
async def test_client(session_factory, storage_service) -> AsyncGenerator[AsyncClient, None]:
    """Async client with database and storage dependencies overridden."""

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_storage_service] = lambda: storage_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def other_auth_headers(other_user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}


# ============================================
# Pytest Configuration
# ============================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "fast: Fast unit tests (in-memory database only)"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that drive the HTTP API"
    )
