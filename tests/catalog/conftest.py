"""Shared fixtures: an in-memory catalog database and an API client bound to it."""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import UTC, datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from movie_catalog.db.connection import enable_sqlite_foreign_keys, get_db
from movie_catalog.db.models import Base, Comment, Movie, User
from movie_catalog.db.repositories import (
    FavouritesRepository,
    MovieRepository,
    UserRepository,
)
from movie_catalog.main import app
from movie_catalog.services.favourites_service import FavouritesService
from movie_catalog.services.movie_service import MovieService


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Single-connection in-memory SQLite engine with freshly created tables."""
    pytest.importorskip("aiosqlite")
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(test_engine)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Provide a session on the in-memory catalog database."""
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as db_session:
        yield db_session
        if db_session.in_transaction():
            await db_session.rollback()


@pytest_asyncio.fixture
async def catalog(session: AsyncSession) -> dict[str, object]:
    """Seed three movies, one comment and the users ``alice`` and ``bob``."""

    movies = [
        Movie(
            id=1,
            title="Arrival",
            genre="Drama",
            duration_minutes=116,
            release_year=2016,
            director="Denis Villeneuve",
            added_at=datetime(2017, 3, 1, tzinfo=UTC),
            rating=8,
        ),
        Movie(
            id=2,
            title="Heat",
            genre="Crime",
            duration_minutes=170,
            release_year=1995,
            director="Michael Mann",
            added_at=datetime(2012, 6, 15, tzinfo=UTC),
            rating=9,
            watched=True,
        ),
        Movie(
            id=3,
            title="Dune",
            genre="Science Fiction",
            duration_minutes=155,
            release_year=2021,
            director="Denis Villeneuve",
            added_at=datetime(2021, 10, 22, tzinfo=UTC),
            rating=7,
        ),
    ]
    alice = User(username="alice", email="alice@example.com")
    bob = User(username="bob")
    session.add_all([*movies, alice, bob])
    session.add(Comment(text="Loved the heptapod design.", movie_id=1))
    await session.commit()
    return {"movies": movies, "alice": alice, "bob": bob}


@pytest.fixture
def favourites_service(session: AsyncSession) -> FavouritesService:
    return FavouritesService(
        favourites=FavouritesRepository(session),
        movies=MovieRepository(session),
        users=UserRepository(session),
    )


@pytest.fixture
def movie_service(session: AsyncSession) -> MovieService:
    return MovieService(MovieRepository(session))


@pytest_asyncio.fixture
async def api_client(
    session: AsyncSession, catalog: dict[str, object]
) -> AsyncIterator[AsyncClient]:
    """HTTP client whose requests share the seeded test session."""

    async def _override_get_db() -> AsyncIterator[AsyncSession]:
        yield session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_db, None)

