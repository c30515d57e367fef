"""Shared fixtures: an in-memory database and record factories."""
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from music_catalog.core.db import create_engine, init_models
from music_catalog.models import Album, Artist, Role, User


def ago(seconds: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(seconds=seconds)


class Factory:
    """Inserts records directly, bypassing policies."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    async def user(self, role: Role = Role.USER, email: Optional[str] = None) -> User:
        user = User(email=email or f"user{self._next()}@example.com", role=role)
        self.db.add(user)
        await self.db.commit()
        return user

    async def artist(self, name: Optional[str] = None, album_count: int = 0, **values) -> Artist:
        artist = Artist(name=name or f"Artist {self._next()}", **values)
        self.db.add(artist)
        await self.db.flush()
        for index in range(album_count):
            self.db.add(Album(name=f"{artist.name} {index + 1}", artist_id=artist.id, year_released=2000 + index))
        await self.db.commit()
        return artist

    async def album(self, artist: Artist, **values) -> Album:
        values.setdefault("name", f"Album {self._next()}")
        album = Album(artist_id=artist.id, **values)
        self.db.add(album)
        await self.db.commit()
        return album


@pytest.fixture
async def engine():
    """Create a fresh in-memory database per test."""
    engine = create_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def factory(db):
    return Factory(db)


@pytest.fixture
async def users(factory):
    """One user per role."""
    return {
        "admin": await factory.user(Role.ADMIN),
        "editor": await factory.user(Role.EDITOR),
        "user": await factory.user(Role.USER),
    }
