# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Must happen before app is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["SECRET_KEY"] = "test-secret-key-for-the-blog-api"
os.environ["PASSWORD_SECURITY_LEVEL"] = "low"
os.environ["LOG_TO_FILE"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LEGACY_OWNERSHIP_401"] = "false"

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from app.db.database import async_session_maker, engine
from app.main import app
from app.managers.rate_limiter import limiter
from app.managers.token_manager import create_access_token
from app.models import PostDB, UserDB
from app.repositories import UserRepository
from app.schemas import UserCreate

type UserFactory = Callable[..., Awaitable[UserDB]]
type PostFactory = Callable[..., Awaitable[PostDB]]

DEFAULT_PASSWORD = "secret123"


@pytest.fixture
async def db() -> AsyncGenerator[None]:
    """Create every table on a fresh in-memory database, drop them afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(db: None) -> AsyncGenerator[AsyncSession]:
    """Database session for arranging data directly."""
    async with async_session_maker() as s:
        yield s


@pytest.fixture
def make_user(session: AsyncSession) -> UserFactory:
    """Factory that registers a user through the repository and commits."""

    async def _make(
        name: str = "Test User",
        email: str = "test@example.com",
        password: str = DEFAULT_PASSWORD,
    ) -> UserDB:
        user = await UserRepository(session).create(
            UserCreate(name=name, email=email, password=password),
        )
        await session.commit()
        return user

    return _make


@pytest.fixture
def make_post(session: AsyncSession) -> PostFactory:
    """Factory that inserts a post row as-is (no slug derivation) and commits."""

    async def _make(author: UserDB, title: str, **fields: object) -> PostDB:
        fields.setdefault("slug", title.lower().replace(" ", "-"))
        fields.setdefault("content", f"Content of {title}")
        fields.setdefault("status", "published")
        fields.setdefault("tags", [])
        post = PostDB(author_id=author.uuid, title=title, **fields)
        session.add(post)
        await session.commit()
        await session.refresh(post)
        return post

    return _make


@pytest.fixture
async def author(make_user: UserFactory) -> UserDB:
    return await make_user(name="Alice Author", email="alice@example.com")


@pytest.fixture
async def other_user(make_user: UserFactory) -> UserDB:
    return await make_user(name="Victor Viewer", email="victor@example.com")


def _bearer(user: UserDB) -> dict[str, str]:
    token = create_access_token(user_id=user.uuid, expires_delta=timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for() -> Callable[[UserDB], dict[str, str]]:
    """Build auth headers with a valid access token for any user."""
    return _bearer


@pytest.fixture
def author_headers(author: UserDB) -> dict[str, str]:
    """Auth headers carrying a valid access token for ``author``."""
    return _bearer(author)


@pytest.fixture
def other_headers(other_user: UserDB) -> dict[str, str]:
    """Auth headers carrying a valid access token for ``other_user``."""
    return _bearer(other_user)


@pytest.fixture
async def client(db: None) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing."""
    limiter.enabled = False
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    limiter.enabled = True
