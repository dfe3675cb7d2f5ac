"""Pytest fixtures and configuration."""

import os
from collections.abc import AsyncGenerator, Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing the app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-at-least-32-characters-long")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from reelrank.database import Base, get_db  # noqa: E402
from reelrank.main import app  # noqa: E402
from reelrank.models import Movie, Review, User  # noqa: E402
from reelrank.utils.clock import utcnow  # noqa: E402
from reelrank.utils.security import create_access_token, hash_password  # noqa: E402

TEST_PASSWORD = "securepassword123"
# Hashed once per session; bcrypt is deliberately slow
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """A fresh in-memory database per test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """A database session for service-level tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def file_session_factory(
    tmp_path: Path,
) -> AsyncGenerator[async_sessionmaker[AsyncSession]]:
    """Session factory over a file database, one connection per session.

    For tests that run several transactions at once.
    """
    file_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'reelrank.db'}",
        connect_args={"timeout": 30},
    )
    async with file_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(file_engine, class_=AsyncSession, expire_on_commit=False)
    await file_engine.dispose()


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints against the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Any]:
    """Factory that commits a user and returns it."""
    counter = {"n": 0}

    async def _make_user(username: str | None = None, is_admin: bool = False) -> User:
        counter["n"] += 1
        name = username or f"user{counter['n']}"
        async with session_factory() as session:
            user = User(
                username=name,
                email=f"{name}@example.com",
                hashed_password=TEST_PASSWORD_HASH,
                is_admin=is_admin,
                is_active=True,
            )
            session.add(user)
            await session.commit()
            return user

    return _make_user


@pytest.fixture
def make_movie(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Any]:
    """Factory that commits a movie and returns it."""
    counter = {"n": 0}

    async def _make_movie(
        title: str | None = None,
        genre: str = "Drama",
        created_at: datetime | None = None,
        **kwargs: Any,
    ) -> Movie:
        counter["n"] += 1
        async with session_factory() as session:
            movie = Movie(
                title=title or f"Movie {counter['n']}",
                genre=genre,
                release_year=kwargs.pop("release_year", 2020),
                director=kwargs.pop("director", "Jane Director"),
                created_at=created_at or utcnow(),
                **kwargs,
            )
            session.add(movie)
            await session.commit()
            return movie

    return _make_movie


@pytest.fixture
def add_review(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Any]:
    """Factory that inserts a review row directly, bypassing the aggregator.

    Useful for building ranking fixtures with controlled timestamps.
    """

    async def _add_review(
        user: User, movie: Movie, rating: int, created_at: datetime | None = None
    ) -> Review:
        now = created_at or utcnow()
        async with session_factory() as session:
            review = Review(
                user_id=user.id,
                movie_id=movie.id,
                rating=rating,
                created_at=now,
                updated_at=now,
            )
            session.add(review)
            await session.commit()
            return review

    return _add_review


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Build bearer token headers for a user."""

    def _auth_headers(user: User) -> dict[str, str]:
        token = create_access_token(data={"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
