"""Product repository for database operations.

Provides point and range queries plus single and bulk writes over the
products table.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.catalog.models import Product


class ProductRepository:
    """Repository for Product database operations.

    Lookups report a missing record as ``None`` and bulk writes report the
    number of affected rows, so callers can tell "not found" apart from a
    storage failure (which propagates as ``SQLAlchemyError``).

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            books = await repo.find_by_category("Fiction")
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def get_by_id(self, product_id: int) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        return await self.session.get(Product, product_id)

    async def find_all(self, include_placeholders: bool = False) -> Sequence[Product]:
        """Find all products ordered by id.

        Args:
            include_placeholders: Whether to include category placeholders.

        Returns:
            Sequence of products.
        """
        query = select(Product)
        if not include_placeholders:
            query = query.where(Product.product_id > 0)
        query = query.order_by(Product.product_id)

        result = await self.session.execute(query)
        return result.scalars().all()

    async def find_by_category(self, name: str, real_only: bool = True) -> Sequence[Product]:
        """Find products in a category.

        Args:
            name: Category name.
            real_only: Restrict to real books (``product_id > 0``).

        Returns:
            Sequence of matching products ordered by id.
        """
        query = select(Product).where(Product.category == name)
        if real_only:
            query = query.where(Product.product_id > 0)
        query = query.order_by(Product.product_id)

        result = await self.session.execute(query)
        return result.scalars().all()

    async def count_by_category(self, name: str, real_only: bool = True) -> int:
        """Count products in a category.

        Args:
            name: Category name.
            real_only: Restrict to real books.

        Returns:
            Number of matching products.
        """
        query = select(func.count(Product.product_id)).where(Product.category == name)
        if real_only:
            query = query.where(Product.product_id > 0)

        result = await self.session.execute(query)
        return result.scalar_one()

    async def insert(self, product: Product) -> Product:
        """Insert a product.

        The flush raises ``IntegrityError`` if the id is already taken.

        Args:
            product: Product to insert.

        Returns:
            Inserted product.
        """
        self.session.add(product)
        await self.session.flush()
        return product

    async def update_by_id(self, product_id: int, values: dict[str, Any]) -> Product | None:
        """Overwrite fields of a single product.

        Args:
            product_id: Product ID.
            values: Attribute names mapped to new values.

        Returns:
            Updated product, or None if no product has that id.
        """
        product = await self.get_by_id(product_id)
        if product is None:
            return None

        for key, value in values.items():
            setattr(product, key, value)

        await self.session.flush()
        return product

    async def delete_by_id(self, product_id: int) -> int:
        """Delete a single product.

        Args:
            product_id: Product ID.

        Returns:
            Number of deleted products (0 or 1).
        """
        result = await self.session.execute(
            delete(Product).where(Product.product_id == product_id)
        )
        return result.rowcount

    async def update_where_category(self, current: str, updated: str) -> int:
        """Move every product of a category to another name.

        Runs as one UPDATE statement so the matching set changes together.

        Args:
            current: Existing category name.
            updated: New category name.

        Returns:
            Number of moved products.
        """
        result = await self.session.execute(
            update(Product)
            .where(Product.category == current)
            .values(category=updated)
        )
        return result.rowcount

    async def delete_where_category(self, name: str) -> int:
        """Delete every product of a category, placeholders included.

        Args:
            name: Category name.

        Returns:
            Number of deleted products.
        """
        result = await self.session.execute(
            delete(Product).where(Product.category == name)
        )
        return result.rowcount

    async def has_placeholder(self, name: str) -> bool:
        """Check whether a placeholder backs a category."""
        result = await self.session.execute(
            select(
                select(Product.product_id)
                .where(Product.category == name, Product.product_id <= 0)
                .exists()
            )
        )
        return result.scalar_one()

    async def delete_placeholders(self, name: str) -> int:
        """Delete the placeholder rows of a category, keeping its books.

        Args:
            name: Category name.

        Returns:
            Number of deleted placeholders.
        """
        result = await self.session.execute(
            delete(Product).where(Product.category == name, Product.product_id <= 0)
        )
        return result.rowcount

    async def max_real_id(self) -> int | None:
        """Get the highest real product id, if any."""
        result = await self.session.execute(
            select(func.max(Product.product_id)).where(Product.product_id > 0)
        )
        return result.scalar_one_or_none()

    async def min_placeholder_id(self) -> int | None:
        """Get the lowest placeholder id, if any."""
        result = await self.session.execute(
            select(func.min(Product.product_id)).where(Product.product_id <= 0)
        )
        return result.scalar_one_or_none()
