"""Shared fixtures for API tests."""

from collections.abc import AsyncGenerator, Callable, Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import bookstore.catalog.models  # noqa: F401
from bookstore.infrastructure.database import Base, get_session
from bookstore.main import app


def override_session(database_url: str) -> Callable[[], AsyncGenerator[AsyncSession, None]]:
    """Build a get_session replacement bound to another database."""
    engine = create_async_engine(database_url, poolclass=NullPool)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def get_test_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return get_test_session


@pytest.fixture
def client(tmp_path) -> Iterator[TestClient]:
    """Create test client backed by a fresh SQLite database."""
    db_path = tmp_path / "api.db"

    sync_engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()

    app.dependency_overrides[get_session] = override_session(f"sqlite+aiosqlite:///{db_path}")
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def book_payload() -> Callable[..., dict[str, Any]]:
    """Build a camelCase book request body."""

    def build(**overrides: Any) -> dict[str, Any]:
        payload = {
            "title": "Dune",
            "author": "Frank Herbert",
            "price": 12000,
            "category": "Fiction",
            "introduction": "A desert planet and its spice.",
            "imgUrl": "https://covers.example.com/dune.jpg",
            "publisher": "Chilton Books",
        }
        payload.update(overrides)
        return payload

    return build
