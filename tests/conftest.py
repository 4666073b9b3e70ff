"""
Pytest configuration and fixtures for tests.
Provides reusable test fixtures for database, users, and data setup.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-at-least-32-characters")

import pytest
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from app.main import fastapi_app
from app.core.database import get_db
from app.models.base import Base
from app.services.storage_service import storage_service


# In-memory SQLite shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    TestSessionLocal = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()


async def _make_user(db_session: AsyncSession, external_id: str, name: str, nickname: str = None):
    from app.models.user import User, UserProfile

    user = User(
        external_id=external_id,
        name=name,
        email=f"{external_id}@example.com"
    )
    db_session.add(user)
    await db_session.flush()

    if nickname:
        db_session.add(UserProfile(user_id=user.id, nickname=nickname))

    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def alice(db_session: AsyncSession):
    """Create Alice (nickname 'ali')."""
    return await _make_user(db_session, "auth|alice", "Alice Anders", nickname="ali")


@pytest.fixture
async def bob(db_session: AsyncSession):
    """Create Bob (no profile)."""
    return await _make_user(db_session, "auth|bob", "Bob Brown")


@pytest.fixture
async def carol(db_session: AsyncSession):
    """Create Carol (nickname 'caz')."""
    return await _make_user(db_session, "auth|carol", "Carol Chen", nickname="caz")


@pytest.fixture
async def dave(db_session: AsyncSession):
    """Create Dave (no profile)."""
    return await _make_user(db_session, "auth|dave", "Dave Diaz")


@pytest.fixture
def make_friends(db_session: AsyncSession):
    """Return a helper that makes two users friends through the request/accept flow."""
    from app.services.relationship_service import RelationshipService

    async def _make_friends(user_a, user_b):
        service = RelationshipService(db_session)
        request = await service.send_friend_request(user_a.id, user_b.id)
        await service.respond_to_friend_request(user_b.id, request["id"], accept=True)

    return _make_friends


@pytest.fixture
async def test_group(db_session: AsyncSession, alice):
    """Create a group owned by Alice."""
    from app.services.group_service import GroupService

    return await GroupService(db_session).create_group(alice.id, "Weekend Hikers", "Trails")


@pytest.fixture
def as_user(db_session: AsyncSession):
    """
    Return a helper that builds an authenticated test client for a user.

    Usage:
        async with as_user(alice) as client:
            await client.get("/api/v1/users/me")
    """
    from app.dependencies import get_current_user

    async def override_get_db():
        yield db_session

    def _as_user(user):
        async def override_current_user():
            return user

        fastapi_app.dependency_overrides[get_db] = override_get_db
        fastapi_app.dependency_overrides[get_current_user] = override_current_user
        return AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test")

    yield _as_user

    # Clear overrides after test
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def unauth_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client WITHOUT authentication (for testing unauthorized access)."""

    async def override_get_db():
        yield db_session

    # Only override database, not authentication
    fastapi_app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as ac:
        yield ac

    # Clear overrides after test
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Return a helper that builds a Bearer header for an identity subject."""
    from app.core.security import create_access_token

    def _auth_headers(subject: str, name: str = None, email: str = None):
        claims = {"sub": subject}
        if name:
            claims["name"] = name
        if email:
            claims["email"] = email
        return {"Authorization": f"Bearer {create_access_token(data=claims)}"}

    return _auth_headers


@pytest.fixture(autouse=True)
def mock_websocket_manager(mocker):
    """Mock WebSocket connection manager for all tests."""
    mock_manager = mocker.AsyncMock()
    mock_manager.notify_group_messages_changed = mocker.AsyncMock()
    mock_manager.notify_direct_messages_changed = mocker.AsyncMock()
    mock_manager.notify_relationships_changed = mocker.AsyncMock()
    mock_manager.notify_groups_changed = mocker.AsyncMock()
    mock_manager.evict_from_group = mocker.AsyncMock()

    mocker.patch("app.services.relationship_service.connection_manager", mock_manager)
    mocker.patch("app.services.group_service.connection_manager", mock_manager)
    mocker.patch("app.services.message_service.connection_manager", mock_manager)

    return mock_manager


@pytest.fixture(autouse=True)
def mock_storage(mocker):
    """Replace OSS URL signing with deterministic fake URLs."""
    mocker.patch.object(
        storage_service,
        "get_file_url",
        side_effect=lambda key: f"https://files.test/{key}" if key else None
    )
    mocker.patch.object(
        storage_service,
        "generate_upload_url",
        side_effect=lambda user_id, file_name=None: {
            "upload_url": f"https://files.test/upload/{user_id}?signature=abc",
            "file_key": f"uploads/{user_id}/0123456789abcdef_{file_name or 'file'}",
        }
    )
    return storage_service
