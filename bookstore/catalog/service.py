"""Catalog service for product and category operations.

High-level service that combines validation, id allocation and repository
operations. Every public method is one unit of work on the session it was
created with; writes commit before returning.
"""

import random
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TypeVar

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.catalog.allocator import IdentifierAllocator
from bookstore.catalog.categories import CategoryIndex, CategorySummary
from bookstore.catalog.models import Product
from bookstore.catalog.repository import ProductRepository
from bookstore.domain.exceptions import (
    CategoryAlreadyExistsError,
    CategoryNotFoundError,
    DomainError,
    EmptyCategoryError,
    IdAllocationError,
    InvalidArgumentError,
    MissingFieldsError,
    ProductNotFoundError,
    SameCategoryNameError,
    StorageError,
)
from bookstore.infrastructure.config import settings

logger = structlog.get_logger()

T = TypeVar("T")

REQUIRED_FIELDS = (
    "title",
    "author",
    "price",
    "category",
    "introduction",
    "img_url",
    "publisher",
)
FLAG_FIELDS = ("best_seller", "new_book", "recommend")


@dataclass
class ProductFields:
    """Fields submitted for creating or updating a book.

    Attributes:
        title: Book title.
        author: Author name.
        price: Price as text.
        category: Category name.
        introduction: Introduction text.
        img_url: Cover image URL.
        publisher: Publisher name.
        best_seller: Explicit best-seller flag, or None to let the service decide.
        new_book: Explicit new-arrival flag, or None to let the service decide.
        recommend: Explicit recommended flag, or None to let the service decide.
    """

    title: str | None = None
    author: str | None = None
    price: str | None = None
    category: str | None = None
    introduction: str | None = None
    img_url: str | None = None
    publisher: str | None = None
    best_seller: bool | None = None
    new_book: bool | None = None
    recommend: bool | None = None

    def missing(self) -> list[str]:
        """Get required fields that are absent or blank."""
        return [name for name in REQUIRED_FIELDS if _is_blank(getattr(self, name))]

    def descriptive_values(self) -> dict[str, str]:
        """Get the required descriptive fields as a dict."""
        return {name: getattr(self, name) for name in REQUIRED_FIELDS}

    def supplied_flags(self) -> dict[str, bool]:
        """Get the flags the caller set explicitly."""
        return {name: getattr(self, name) for name in FLAG_FIELDS if getattr(self, name) is not None}


def _is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


class CatalogService:
    """Service for catalog operations.

    Provides category management (create, rename, delete) over the derived
    category index and book management for administrators and shoppers.

    Example usage:
        async with async_session_factory() as session:
            service = CatalogService(session)

            await service.create_category("Fiction")
            book = await service.create_product(
                ProductFields(title="Dune", author="Frank Herbert", ...)
            )
    """

    def __init__(
        self,
        session: AsyncSession,
        rng: random.Random | None = None,
        allow_category_merge: bool | None = None,
        rename_requires_known_category: bool | None = None,
        randomize_flags_on_update: bool | None = None,
        max_attempts: int | None = None,
    ) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
            rng: Random source for badge flags.
            allow_category_merge: Allow renaming onto an existing category.
                Defaults to ``settings.allow_category_merge``.
            rename_requires_known_category: Reject renames of unknown
                categories. Defaults to
                ``settings.rename_requires_known_category``.
            randomize_flags_on_update: Re-roll badge flags on every update.
                Defaults to ``settings.randomize_flags_on_update``.
            max_attempts: Insert attempts before giving up on id allocation.
                Defaults to ``settings.id_allocation_retries``.
        """
        self.session = session
        self.repository = ProductRepository(session)
        self.categories = CategoryIndex(session)
        self.allocator = IdentifierAllocator(session, self.repository)
        self.rng = rng or random.Random()
        self.allow_category_merge = (
            settings.allow_category_merge if allow_category_merge is None else allow_category_merge
        )
        self.rename_requires_known_category = (
            settings.rename_requires_known_category
            if rename_requires_known_category is None
            else rename_requires_known_category
        )
        self.randomize_flags_on_update = (
            settings.randomize_flags_on_update
            if randomize_flags_on_update is None
            else randomize_flags_on_update
        )
        self.max_attempts = max(1, max_attempts or settings.id_allocation_retries)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def list_categories(self) -> list[str]:
        """Get all category names, including categories without books.

        Returns:
            Sorted category names.
        """
        with self._storage_errors("list_categories"):
            return await self.categories.list_categories()

    async def get_category_summaries(self) -> list[CategorySummary]:
        """Get categories with their real-book counts.

        Returns:
            Category summaries.
        """
        with self._storage_errors("get_category_summaries"):
            return await self.categories.summaries()

    async def create_category(self, name: str | None) -> Product:
        """Register a new, empty category.

        Args:
            name: Category name.

        Returns:
            The placeholder product that keeps the category listed.

        Raises:
            InvalidArgumentError: If the name is blank.
            CategoryAlreadyExistsError: If the category is already listed.
        """
        if _is_blank(name):
            raise InvalidArgumentError("Category name is required", details={"field": "category"})

        async def work() -> Product:
            if await self.categories.contains(name):
                raise CategoryAlreadyExistsError(name)
            placeholder_id = await self.allocator.next_placeholder_id()
            return await self.repository.insert(Product.placeholder(placeholder_id, name))

        placeholder = await self._write("create_category", work, allocates=True)

        logger.info(
            "Category created",
            category=name,
            placeholder_id=placeholder.product_id,
        )
        return placeholder

    async def rename_category(self, current: str | None, updated: str | None) -> int:
        """Rename a category on every product that carries it.

        Args:
            current: Existing category name.
            updated: New category name.

        Renaming onto an existing category merges the two. When both carry a
        placeholder, the placeholder of ``current`` is dropped. Renaming an
        unknown category moves nothing.

        Returns:
            Number of products moved to the new name.

        Raises:
            InvalidArgumentError: If a name is blank or both names are equal.
            CategoryNotFoundError: If ``current`` is unknown and unknown
                categories are rejected.
            CategoryAlreadyExistsError: If ``updated`` names another category
                and merging is not allowed.
        """
        missing = [
            field
            for field, value in (("current", current), ("updated", updated))
            if _is_blank(value)
        ]
        if missing:
            raise MissingFieldsError(missing)
        if current == updated:
            raise SameCategoryNameError(current)

        async def work() -> int:
            if self.rename_requires_known_category and not await self.categories.contains(current):
                raise CategoryNotFoundError(current)
            if await self.categories.contains(updated):
                if not self.allow_category_merge:
                    raise CategoryAlreadyExistsError(updated)
                if await self.repository.has_placeholder(updated):
                    await self.repository.delete_placeholders(current)
            return await self.repository.update_where_category(current, updated)

        moved = await self._write("rename_category", work)

        logger.info(
            "Category renamed",
            category=current,
            new_category=updated,
            moved=moved,
        )
        return moved

    async def delete_category(self, name: str | None) -> int:
        """Delete a category together with every product in it.

        Args:
            name: Category name.

        Returns:
            Number of deleted products, placeholders included.

        Raises:
            InvalidArgumentError: If the name is blank.
            CategoryNotFoundError: If the category is not listed.
        """
        if _is_blank(name):
            raise InvalidArgumentError("Category name is required", details={"field": "category"})

        async def work() -> int:
            if not await self.categories.contains(name):
                raise CategoryNotFoundError(name)
            return await self.repository.delete_where_category(name)

        deleted = await self._write("delete_category", work)

        logger.info(
            "Category deleted",
            category=name,
            deleted=deleted,
        )
        return deleted

    # ------------------------------------------------------------------
    # Products: administration
    # ------------------------------------------------------------------

    async def create_product(self, fields: ProductFields) -> Product:
        """Add a book to the catalog.

        Args:
            fields: Book fields. Flags left as None are assigned at random.

        Returns:
            The stored book.

        Raises:
            MissingFieldsError: If a required field is absent or blank.
        """
        missing = fields.missing()
        if missing:
            raise MissingFieldsError(missing)

        values = fields.descriptive_values()
        flags = {name: self._random_flag() for name in FLAG_FIELDS}
        flags.update(fields.supplied_flags())

        async def work() -> Product:
            product_id = await self.allocator.next_real_id()
            return await self.repository.insert(Product(product_id=product_id, **values, **flags))

        product = await self._write("create_product", work, allocates=True)

        logger.info(
            "Product created",
            product_id=product.product_id,
            category=product.category,
        )
        return product

    async def update_product(self, product_id: int, fields: ProductFields) -> Product:
        """Overwrite the descriptive fields of a book.

        Flags keep their stored values unless supplied by the caller, or
        unless the service re-rolls them on update.

        Args:
            product_id: Book id.
            fields: New field values.

        Returns:
            The updated book.

        Raises:
            MissingFieldsError: If a required field is absent or blank.
            ProductNotFoundError: If no product has that id.
        """
        missing = fields.missing()
        if missing:
            raise MissingFieldsError(missing)

        values: dict[str, object] = dict(fields.descriptive_values())
        if self.randomize_flags_on_update:
            values.update({name: self._random_flag() for name in FLAG_FIELDS})
        values.update(fields.supplied_flags())

        async def work() -> Product:
            product = await self.repository.update_by_id(product_id, values)
            if product is None:
                raise ProductNotFoundError(product_id)
            return product

        product = await self._write("update_product", work)

        logger.info(
            "Product updated",
            product_id=product_id,
            category=product.category,
        )
        return product

    async def delete_product(self, product_id: int) -> None:
        """Remove a single book.

        Args:
            product_id: Book id.

        Raises:
            ProductNotFoundError: If no product has that id.
        """

        async def work() -> None:
            if await self.repository.delete_by_id(product_id) == 0:
                raise ProductNotFoundError(product_id)

        await self._write("delete_product", work)

        logger.info("Product deleted", product_id=product_id)

    # ------------------------------------------------------------------
    # Products: browsing
    # ------------------------------------------------------------------

    async def list_products(self) -> list[Product]:
        """Get every real book, placeholders excluded.

        Returns:
            Books ordered by id.
        """
        with self._storage_errors("list_products"):
            return list(await self.repository.find_all())

    async def list_all_records(self) -> list[Product]:
        """Get every product row, placeholders included.

        Returns:
            Products ordered by id.
        """
        with self._storage_errors("list_all_records"):
            return list(await self.repository.find_all(include_placeholders=True))

    async def list_products_by_category(self, name: str | None) -> list[Product]:
        """Get the real books of a category.

        Args:
            name: Category name.

        Returns:
            Books ordered by id.

        Raises:
            CategoryNotFoundError: If the category is not listed.
            EmptyCategoryError: If the category holds no real books.
        """
        with self._storage_errors("list_products_by_category"):
            if _is_blank(name) or not await self.categories.contains(name):
                raise CategoryNotFoundError(name)
            products = list(await self.repository.find_by_category(name))

        if not products:
            raise EmptyCategoryError(name)
        return products

    async def get_product(self, product_id: int) -> Product:
        """Get a product by id.

        Args:
            product_id: Product id.

        Returns:
            The product.

        Raises:
            ProductNotFoundError: If no product has that id.
        """
        with self._storage_errors("get_product"):
            product = await self.repository.get_by_id(product_id)

        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _random_flag(self) -> bool:
        return self.rng.choice((True, False))

    async def _write(
        self,
        operation: str,
        work: Callable[[], Awaitable[T]],
        allocates: bool = False,
    ) -> T:
        """Run ``work`` in a transaction and commit it.

        When ``allocates`` is set, a uniqueness conflict on insert (a taken id
        or a second placeholder for one category) is retried after resyncing
        the id counters. Any failure rolls the whole
        transaction back.
        """
        attempts = self.max_attempts if allocates else 1
        for attempt in range(1, attempts + 1):
            try:
                if attempt > 1:
                    await self.allocator.resync()
                outcome = await work()
                await self.session.commit()
                return outcome
            except DomainError:
                await self.session.rollback()
                raise
            except IntegrityError as e:
                await self.session.rollback()
                if not allocates:
                    logger.error(
                        "Integrity error",
                        operation=operation,
                        error=str(e.orig),
                    )
                    raise StorageError(operation, str(e.orig)) from e
                logger.warning(
                    "Insert conflict, retrying",
                    operation=operation,
                    attempt=attempt,
                    max_attempts=attempts,
                )
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(
                    "Storage failure",
                    operation=operation,
                    error=str(e),
                )
                raise StorageError(operation, str(e)) from e

        logger.error(
            "Id allocation exhausted",
            operation=operation,
            attempts=attempts,
        )
        raise IdAllocationError(attempts)

    @contextmanager
    def _storage_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(
                "Storage failure",
                operation=operation,
                error=str(e),
            )
            raise StorageError(operation, str(e)) from e
