"""Category index.

Categories are not stored on their own: a category exists while at least
one product row (real book or placeholder) carries its name. The index
projects the distinct names out of the products table.
"""

from dataclasses import dataclass

from sqlalchemy import case, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.catalog.models import Product


@dataclass
class CategorySummary:
    """Category with its book count.

    Attributes:
        name: Category name.
        book_count: Number of real books in the category.
        has_placeholder: Whether a placeholder row backs the category.
    """

    name: str
    book_count: int
    has_placeholder: bool


class CategoryIndex:
    """Derived view of the category names present in the catalog."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize index with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def list_categories(self) -> list[str]:
        """Get distinct category names across all products.

        Placeholders count, so a category with no books is still listed.

        Returns:
            Sorted list of category names.
        """
        query = select(Product.category).distinct().order_by(Product.category)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def contains(self, name: str) -> bool:
        """Check whether a category is present.

        Args:
            name: Category name.

        Returns:
            True if any product carries that category.
        """
        query = select(exists().where(Product.category == name))
        result = await self.session.execute(query)
        return bool(result.scalar())

    async def summaries(self) -> list[CategorySummary]:
        """Get every category with its real-book count.

        Returns:
            Summaries ordered by category name.
        """
        query = (
            select(
                Product.category,
                func.count(case((Product.product_id > 0, 1))).label("book_count"),
                func.count(case((Product.product_id <= 0, 1))).label("placeholder_count"),
            )
            .group_by(Product.category)
            .order_by(Product.category)
        )

        result = await self.session.execute(query)
        return [
            CategorySummary(
                name=row.category,
                book_count=row.book_count,
                has_placeholder=row.placeholder_count > 0,
            )
            for row in result.all()
        ]
