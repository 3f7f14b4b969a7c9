"""Shared fixtures for catalog tests.

Each test gets its own SQLite database file so tests never share state.
"""

import random
from collections.abc import Callable
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from bookstore.catalog.models import Product
from bookstore.catalog.service import CatalogService, ProductFields
from bookstore.infrastructure.database import init_models


@pytest.fixture
def database_url(tmp_path) -> str:
    """URL of a fresh SQLite database file."""
    return f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"


@pytest.fixture
async def engine(database_url: str):
    """Create engine with catalog tables."""
    engine = create_async_engine(database_url, poolclass=NullPool)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    """Create session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    """Create a database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def service(session: AsyncSession) -> CatalogService:
    """Create catalog service with a seeded random source."""
    return CatalogService(session, rng=random.Random(7))


@pytest.fixture
def book_fields() -> Callable[..., ProductFields]:
    """Build complete book fields, with optional overrides."""

    def build(**overrides: Any) -> ProductFields:
        values = {
            "title": "Dune",
            "author": "Frank Herbert",
            "price": "12000",
            "category": "Fiction",
            "introduction": "A desert planet and its spice.",
            "img_url": "https://covers.example.com/dune.jpg",
            "publisher": "Chilton Books",
        }
        values.update(overrides)
        return ProductFields(**values)

    return build


@pytest.fixture
def make_product() -> Callable[..., Product]:
    """Build an unsaved product row with an explicit id."""

    def build(product_id: int, category: str = "Fiction", **overrides: Any) -> Product:
        if product_id <= 0:
            return Product.placeholder(product_id, category)
        values = {
            "title": f"Book {product_id}",
            "author": "Author",
            "price": "1000",
            "introduction": "Introduction",
            "img_url": "https://covers.example.com/book.jpg",
            "publisher": "Publisher",
        }
        values.update(overrides)
        return Product(product_id=product_id, category=category, **values)

    return build
