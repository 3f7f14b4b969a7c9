"""SQLAlchemy models for the book catalog.

Defines the Product table (books and category placeholders) and the
counter table used for product id allocation.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from bookstore.infrastructure.database import Base

# Value stored in descriptive fields of placeholder rows
BLANK = " "


class Product(Base):
    """Product entity in the catalog.

    A row with a positive ``product_id`` is a real book. A row with a zero
    or negative ``product_id`` is a placeholder that keeps an otherwise
    empty category visible in the category index.

    Attributes:
        product_id: Unique product identifier.
        title: Book title.
        author: Author name.
        price: Price as entered by the administrator.
        category: Category name, the grouping key.
        introduction: Book introduction text.
        img_url: Cover image URL.
        publisher: Publisher name.
        best_seller: Best-seller badge.
        new_book: New-arrival badge.
        recommend: Recommended badge.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"
    __table_args__ = (
        # At most one placeholder per category
        Index(
            "uq_products_category_placeholder",
            "category",
            unique=True,
            postgresql_where=text("product_id <= 0"),
            sqlite_where=text("product_id <= 0"),
        ),
    )

    product_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[str] = mapped_column(String(50), nullable=False)
    category: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    introduction: Mapped[str] = mapped_column(Text, nullable=False)
    img_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    publisher: Mapped[str] = mapped_column(String(255), nullable=False)
    best_seller: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    new_book: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recommend: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(product_id={self.product_id}, category={self.category}, title={self.title[:30]})>"

    @property
    def is_placeholder(self) -> bool:
        """Whether this row only stands in for an empty category."""
        return self.product_id <= 0

    @classmethod
    def placeholder(cls, product_id: int, category: str) -> "Product":
        """Build a placeholder row for a category.

        Args:
            product_id: Allocated placeholder id (zero or negative).
            category: Category the placeholder keeps alive.

        Returns:
            Unsaved placeholder product.
        """
        return cls(
            product_id=product_id,
            title=BLANK,
            author=BLANK,
            price=BLANK,
            category=category,
            introduction=BLANK,
            img_url=BLANK,
            publisher=BLANK,
            best_seller=False,
            new_book=False,
            recommend=False,
        )


class IdCounter(Base):
    """Last product id handed out for one id range.

    Attributes:
        name: Counter name (``"real"`` or ``"placeholder"``).
        value: Most recently allocated id in that range.
    """

    __tablename__ = "product_id_counters"

    name: Mapped[str] = mapped_column(String(32), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        """String representation."""
        return f"<IdCounter(name={self.name}, value={self.value})>"
