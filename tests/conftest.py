"""Test fixtures: async DB + FastAPI test client.

Every test gets a fresh in-memory SQLite database; the get_db dependency is
overridden so requests and fixtures share it.
"""

from datetime import datetime, timedelta, timezone

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as AsyncSessionSQLModel

import instaclone.models  # noqa: F401
from instaclone.core.security import create_access_token, get_password_hash
from instaclone.db.database import get_db
from instaclone.main import app
from instaclone.models.post import Post
from instaclone.models.user import User

TEST_PASSWORD = "password123"
# hashed once; bcrypt is slow on purpose
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


def auth_headers(user: User) -> dict:
    token, _ = create_access_token(user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_factory(test_engine):
    return sessionmaker(
        bind=test_engine,
        class_=AsyncSessionSQLModel,
        expire_on_commit=False,
        autoflush=False
    )


@pytest_asyncio.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def make_user(test_db):
    async def _make_user(username: str, profile_image_url: str = "", bio: str = "") -> User:
        user = User(
            username=username,
            email=f"{username.lower()}@example.com",
            hashed_password=TEST_PASSWORD_HASH,
            profile_image_url=profile_image_url,
            bio=bio,
        )
        test_db.add(user)
        await test_db.commit()
        return user

    return _make_user


@pytest_asyncio.fixture
async def make_post(test_db):
    """Insert a post directly, with an explicit creation time when ordering matters"""
    async def _make_post(owner: User, caption: str = "", created_at: datetime = None) -> Post:
        post = Post(
            user_id=owner.id,
            image_url=f"https://cdn.example.com/{owner.username}/{caption or 'img'}.jpg",
            caption=caption,
        )
        if created_at is not None:
            post.created_at = created_at
        test_db.add(post)
        await test_db.commit()
        return post

    return _make_post


@pytest_asyncio.fixture
async def alice(make_user):
    return await make_user("alice", profile_image_url="https://cdn.example.com/alice.png")


@pytest_asyncio.fixture
async def bob(make_user):
    return await make_user("bob", profile_image_url="https://cdn.example.com/bob.png")


@pytest_asyncio.fixture
async def carol(make_user):
    return await make_user("carol")


def minutes_ago(n: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(minutes=n)
