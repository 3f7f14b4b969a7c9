"""Tests for CatalogService."""

import asyncio
import random

import pytest
from sqlalchemy.exc import OperationalError

from bookstore.catalog.repository import ProductRepository
from bookstore.catalog.service import CatalogService, ProductFields
from bookstore.domain.exceptions import (
    CategoryAlreadyExistsError,
    CategoryNotFoundError,
    EmptyCategoryError,
    IdAllocationError,
    InvalidArgumentError,
    MissingFieldsError,
    ProductNotFoundError,
    SameCategoryNameError,
    StorageError,
)


class AlwaysTrue(random.Random):
    """Random source that always picks the first option."""

    def choice(self, seq):
        return seq[0]


# ============================================================================
# Categories
# ============================================================================


class TestCreateCategory:
    """Tests for creating categories."""

    async def test_create_category_inserts_placeholder(self, service: CatalogService) -> None:
        """A new category is backed by a blank placeholder row."""
        placeholder = await service.create_category("Fiction")

        assert placeholder.product_id == 0
        assert placeholder.category == "Fiction"
        assert placeholder.is_placeholder
        assert placeholder.title.strip() == ""
        assert await service.list_categories() == ["Fiction"]

    async def test_create_category_twice_conflicts(self, service: CatalogService) -> None:
        """The second create of the same name is a conflict."""
        await service.create_category("Fiction")

        with pytest.raises(CategoryAlreadyExistsError):
            await service.create_category("Fiction")

        assert await service.list_categories() == ["Fiction"]

    async def test_create_category_with_existing_books_conflicts(
        self, service: CatalogService, book_fields
    ) -> None:
        """A category that exists through books cannot be created again."""
        await service.create_product(book_fields(category="Science"))

        with pytest.raises(CategoryAlreadyExistsError):
            await service.create_category("Science")

    @pytest.mark.parametrize("name", ["", "   ", None])
    async def test_create_category_blank_name(self, service: CatalogService, name) -> None:
        """Blank names are rejected."""
        with pytest.raises(InvalidArgumentError):
            await service.create_category(name)

    async def test_placeholder_ids_decrease(self, service: CatalogService) -> None:
        """Each empty category gets the next lower placeholder id."""
        ids = [(await service.create_category(name)).product_id for name in ("A", "B", "C")]
        assert ids == [0, -1, -2]


class TestRenameCategory:
    """Tests for renaming categories."""

    async def test_rename_moves_every_product(self, service: CatalogService, book_fields) -> None:
        """All rows of the category move, placeholder included."""
        await service.create_category("Fiction")
        for title in ("One", "Two", "Three"):
            await service.create_product(book_fields(title=title))

        moved = await service.rename_category("Fiction", "Novels")

        assert moved == 4
        assert await service.list_categories() == ["Novels"]
        books = await service.list_products_by_category("Novels")
        assert [b.title for b in books] == ["One", "Two", "Three"]
        with pytest.raises(CategoryNotFoundError):
            await service.list_products_by_category("Fiction")

    async def test_rename_leaves_other_categories(self, service: CatalogService, book_fields) -> None:
        """Only the matching category is renamed."""
        await service.create_product(book_fields(category="Fiction"))
        await service.create_product(book_fields(category="Science"))

        await service.rename_category("Fiction", "Novels")

        assert await service.list_categories() == ["Novels", "Science"]

    async def test_rename_same_name(self, service: CatalogService) -> None:
        """Renaming to the same name is invalid."""
        await service.create_category("Fiction")

        with pytest.raises(SameCategoryNameError):
            await service.rename_category("Fiction", "Fiction")

    @pytest.mark.parametrize(
        ("current", "updated"),
        [("", "Novels"), ("Fiction", ""), (None, "Novels"), ("Fiction", "  ")],
    )
    async def test_rename_blank_names(self, service: CatalogService, current, updated) -> None:
        """Both names are required."""
        with pytest.raises(MissingFieldsError):
            await service.rename_category(current, updated)

    async def test_rename_unknown_category_moves_nothing(self, service: CatalogService) -> None:
        """Renaming a category that does not exist moves no rows."""
        await service.create_category("Fiction")

        assert await service.rename_category("Travel", "Trips") == 0
        assert await service.list_categories() == ["Fiction"]

    async def test_rename_unknown_category_rejected_when_required(self, session) -> None:
        """Unknown categories can be rejected instead."""
        service = CatalogService(session, rename_requires_known_category=True)

        with pytest.raises(CategoryNotFoundError):
            await service.rename_category("Travel", "Trips")

    async def test_rename_onto_existing_category_merges(
        self, service: CatalogService, book_fields
    ) -> None:
        """Renaming onto an existing category merges the two."""
        await service.create_product(book_fields(category="Fiction"))
        await service.create_product(book_fields(category="Novels"))

        moved = await service.rename_category("Fiction", "Novels")

        assert moved == 1
        assert await service.list_categories() == ["Novels"]
        assert len(await service.list_products_by_category("Novels")) == 2

    async def test_merge_keeps_one_placeholder(self, service: CatalogService, book_fields) -> None:
        """Merging two placeholder-backed categories leaves one placeholder."""
        await service.create_category("Fiction")
        await service.create_category("Novels")
        await service.create_product(book_fields(category="Fiction"))

        moved = await service.rename_category("Fiction", "Novels")

        assert moved == 1
        records = await service.list_all_records()
        assert [(p.product_id, p.category) for p in records] == [(-1, "Novels"), (1, "Novels")]

    async def test_rename_onto_existing_category_rejected_when_merge_disabled(
        self, session, book_fields
    ) -> None:
        """Merging can be switched off."""
        service = CatalogService(session, allow_category_merge=False)
        await service.create_product(book_fields(category="Fiction"))
        await service.create_product(book_fields(category="Novels"))

        with pytest.raises(CategoryAlreadyExistsError):
            await service.rename_category("Fiction", "Novels")

        assert await service.list_categories() == ["Fiction", "Novels"]

    async def test_rename_failure_leaves_state_unchanged(
        self, service: CatalogService, session_factory, book_fields, monkeypatch
    ) -> None:
        """A storage failure rolls back the whole rename."""
        await service.create_category("Fiction")
        await service.create_product(book_fields())

        real_update = service.repository.update_where_category

        async def failing_update(current: str, updated: str) -> int:
            await real_update(current, updated)
            raise OperationalError("UPDATE products", {}, Exception("disk I/O error"))

        monkeypatch.setattr(service.repository, "update_where_category", failing_update)

        with pytest.raises(StorageError):
            await service.rename_category("Fiction", "Novels")

        async with session_factory() as other:
            assert await CatalogService(other).list_categories() == ["Fiction"]


class TestDeleteCategory:
    """Tests for deleting categories."""

    async def test_delete_removes_books_and_placeholder(
        self, service: CatalogService, book_fields
    ) -> None:
        """Every row of the category is removed."""
        await service.create_category("Fiction")
        await service.create_product(book_fields())
        await service.create_product(book_fields())
        await service.create_product(book_fields(category="Science"))

        deleted = await service.delete_category("Fiction")

        assert deleted == 3
        assert await service.list_categories() == ["Science"]
        assert [p.category for p in await service.list_all_records()] == ["Science"]

    async def test_delete_unknown_category(self, service: CatalogService) -> None:
        """Deleting an unknown category is not found."""
        with pytest.raises(CategoryNotFoundError):
            await service.delete_category("Travel")

    async def test_delete_blank_name(self, service: CatalogService) -> None:
        """Blank names are rejected."""
        with pytest.raises(InvalidArgumentError):
            await service.delete_category(" ")

    async def test_delete_failure_leaves_state_unchanged(
        self, service: CatalogService, session_factory, book_fields, monkeypatch
    ) -> None:
        """A storage failure rolls back the whole delete."""
        await service.create_category("Fiction")
        await service.create_product(book_fields())

        real_delete = service.repository.delete_where_category

        async def failing_delete(name: str) -> int:
            await real_delete(name)
            raise OperationalError("DELETE FROM products", {}, Exception("disk I/O error"))

        monkeypatch.setattr(service.repository, "delete_where_category", failing_delete)

        with pytest.raises(StorageError):
            await service.delete_category("Fiction")

        async with session_factory() as other:
            survivor = CatalogService(other)
            assert await survivor.list_categories() == ["Fiction"]
            assert [p.product_id for p in await survivor.list_all_records()] == [0, 1]


# ============================================================================
# Products
# ============================================================================


class TestCreateProduct:
    """Tests for adding books."""

    async def test_create_product(self, service: CatalogService, book_fields) -> None:
        """A book is stored with an allocated id and flags."""
        product = await service.create_product(book_fields())

        assert product.product_id == 1
        assert product.title == "Dune"
        assert product.img_url == "https://covers.example.com/dune.jpg"
        assert isinstance(product.best_seller, bool)
        assert isinstance(product.new_book, bool)
        assert isinstance(product.recommend, bool)

    async def test_ids_strictly_increase(self, service: CatalogService, book_fields) -> None:
        """Every new book gets a higher id than all earlier ones."""
        ids = [(await service.create_product(book_fields())).product_id for _ in range(4)]
        assert ids == sorted(ids)
        assert len(set(ids)) == 4

    async def test_ids_not_reused_after_delete(self, service: CatalogService, book_fields) -> None:
        """Deleting the newest book does not hand its id out again."""
        first = await service.create_product(book_fields())
        await service.delete_product(first.product_id)

        second = await service.create_product(book_fields())

        assert second.product_id > first.product_id

    @pytest.mark.parametrize(
        "field",
        ["title", "author", "price", "category", "introduction", "img_url", "publisher"],
    )
    async def test_missing_required_field(self, service: CatalogService, book_fields, field) -> None:
        """Every descriptive field is required."""
        with pytest.raises(MissingFieldsError) as exc_info:
            await service.create_product(book_fields(**{field: None}))

        assert exc_info.value.fields == [field]
        assert await service.list_products() == []

    async def test_blank_field_counts_as_missing(self, service: CatalogService, book_fields) -> None:
        """Whitespace-only values are rejected."""
        with pytest.raises(MissingFieldsError):
            await service.create_product(book_fields(title="  "))

    async def test_random_flags_use_rng(self, session, book_fields) -> None:
        """Flags not supplied are drawn from the random source."""
        service = CatalogService(session, rng=AlwaysTrue())

        product = await service.create_product(book_fields())

        assert product.best_seller and product.new_book and product.recommend

    async def test_supplied_flags_win(self, session, book_fields) -> None:
        """Caller flags are stored as given."""
        service = CatalogService(session, rng=AlwaysTrue())

        product = await service.create_product(book_fields(best_seller=False, recommend=False))

        assert product.best_seller is False
        assert product.new_book is True
        assert product.recommend is False

    async def test_new_category_from_book(self, service: CatalogService, book_fields) -> None:
        """A book with an unseen category makes that category exist."""
        await service.create_product(book_fields(category="Travel"))
        assert await service.list_categories() == ["Travel"]

    async def test_conflict_is_retried_with_fresh_id(
        self, service: CatalogService, session_factory, book_fields, make_product
    ) -> None:
        """An id taken behind the allocator's back is skipped."""
        first = await service.create_product(book_fields())
        assert first.product_id == 1

        async with session_factory() as other:
            await ProductRepository(other).insert(make_product(2))
            await other.commit()

        second = await service.create_product(book_fields(title="Retry"))

        assert second.product_id == 3
        assert (await service.get_product(3)).title == "Retry"

    async def test_conflict_retries_exhausted(
        self, session, session_factory, book_fields, make_product, monkeypatch
    ) -> None:
        """Allocation gives up after the configured attempts."""
        async with session_factory() as other:
            await ProductRepository(other).insert(make_product(5))
            await other.commit()

        service = CatalogService(session, max_attempts=2)

        async def stuck_id() -> int:
            return 5

        monkeypatch.setattr(service.allocator, "next_real_id", stuck_id)

        with pytest.raises(IdAllocationError):
            await service.create_product(book_fields())

        assert [p.product_id for p in await service.list_products()] == [5]


class TestUpdateProduct:
    """Tests for editing books."""

    async def test_update_product(self, service: CatalogService, book_fields) -> None:
        """Descriptive fields are overwritten."""
        created = await service.create_product(book_fields())

        updated = await service.update_product(
            created.product_id,
            book_fields(title="Dune Messiah", price="13000", category="Sci-Fi"),
        )

        assert updated.product_id == created.product_id
        assert updated.title == "Dune Messiah"
        assert updated.price == "13000"
        assert updated.category == "Sci-Fi"

    async def test_update_keeps_flags(self, service: CatalogService, book_fields) -> None:
        """Flags stay stable across edits by default."""
        created = await service.create_product(
            book_fields(best_seller=True, new_book=False, recommend=True)
        )

        updated = await service.update_product(created.product_id, book_fields(title="Edited"))

        assert (updated.best_seller, updated.new_book, updated.recommend) == (True, False, True)

    async def test_update_applies_supplied_flags(self, service: CatalogService, book_fields) -> None:
        """Caller flags are applied on update."""
        created = await service.create_product(book_fields(new_book=True))

        updated = await service.update_product(created.product_id, book_fields(new_book=False))

        assert updated.new_book is False

    async def test_update_rerolls_flags_when_enabled(self, session, book_fields) -> None:
        """Legacy re-randomizing can be switched on."""
        service = CatalogService(session, rng=AlwaysTrue(), randomize_flags_on_update=True)
        created = await service.create_product(
            book_fields(best_seller=False, new_book=False, recommend=False)
        )

        updated = await service.update_product(created.product_id, book_fields())

        assert updated.best_seller and updated.new_book and updated.recommend

    async def test_update_unknown_product(self, service: CatalogService, book_fields) -> None:
        """Updating an unknown id is not found."""
        with pytest.raises(ProductNotFoundError):
            await service.update_product(99, book_fields())

    async def test_update_missing_field(self, service: CatalogService, book_fields) -> None:
        """Updates require every descriptive field."""
        created = await service.create_product(book_fields())

        with pytest.raises(MissingFieldsError):
            await service.update_product(created.product_id, book_fields(author=""))


class TestDeleteProduct:
    """Tests for removing books."""

    async def test_delete_product(self, service: CatalogService, book_fields) -> None:
        """Exactly the requested book is removed."""
        keep = await service.create_product(book_fields(title="Keep"))
        drop = await service.create_product(book_fields(title="Drop"))

        await service.delete_product(drop.product_id)

        assert [p.product_id for p in await service.list_products()] == [keep.product_id]

    async def test_delete_unknown_product(self, service: CatalogService) -> None:
        """Deleting an unknown id is not found."""
        with pytest.raises(ProductNotFoundError):
            await service.delete_product(42)


class TestBrowse:
    """Tests for read operations."""

    async def test_list_products_excludes_placeholders(
        self, service: CatalogService, book_fields
    ) -> None:
        """Shoppers never see placeholder rows."""
        await service.create_category("Poetry")
        await service.create_product(book_fields())

        products = await service.list_products()

        assert all(p.product_id > 0 for p in products)
        assert len(products) == 1

    async def test_list_all_records_includes_placeholders(
        self, service: CatalogService, book_fields
    ) -> None:
        """The admin listing shows every row."""
        await service.create_category("Poetry")
        await service.create_product(book_fields())

        records = await service.list_all_records()

        assert [p.product_id for p in records] == [0, 1]

    async def test_list_by_category(self, service: CatalogService, book_fields) -> None:
        """Only books of the category are returned."""
        await service.create_product(book_fields(title="A"))
        await service.create_product(book_fields(title="B", category="Science"))

        books = await service.list_products_by_category("Fiction")

        assert [b.title for b in books] == ["A"]

    async def test_list_by_unknown_category(self, service: CatalogService) -> None:
        """Unknown categories are not found."""
        with pytest.raises(CategoryNotFoundError):
            await service.list_products_by_category("Travel")

    @pytest.mark.parametrize("name", ["", "  ", None])
    async def test_list_by_blank_category(self, service: CatalogService, book_fields, name) -> None:
        """A blank name is never a known category."""
        await service.create_product(book_fields())

        with pytest.raises(CategoryNotFoundError):
            await service.list_products_by_category(name)

    async def test_list_by_empty_category(self, service: CatalogService) -> None:
        """A category with only a placeholder has no books."""
        await service.create_category("Poetry")

        with pytest.raises(EmptyCategoryError):
            await service.list_products_by_category("Poetry")

    async def test_get_product(self, service: CatalogService, book_fields) -> None:
        """Books can be fetched by id."""
        created = await service.create_product(book_fields())

        product = await service.get_product(created.product_id)

        assert product.title == "Dune"

    async def test_get_unknown_product(self, service: CatalogService) -> None:
        """Unknown ids are not found."""
        with pytest.raises(ProductNotFoundError):
            await service.get_product(7)


# ============================================================================
# Concurrent writers
# ============================================================================


class TestConcurrentWriters:
    """Tests for writers running at the same time, each on its own session."""

    async def test_concurrent_products_get_distinct_ids(
        self, session_factory, book_fields
    ) -> None:
        """Simultaneous creates never share an id and leave no gaps."""

        async def create(title: str) -> int:
            async with session_factory() as session:
                product = await CatalogService(session).create_product(book_fields(title=title))
                return product.product_id

        ids = await asyncio.gather(*(create(f"Book {n}") for n in range(6)))

        assert sorted(ids) == [1, 2, 3, 4, 5, 6]

    async def test_concurrent_categories_get_distinct_ids(self, session_factory) -> None:
        """Simultaneous category creates get distinct placeholder ids."""

        async def create(name: str) -> int:
            async with session_factory() as session:
                placeholder = await CatalogService(session).create_category(name)
                return placeholder.product_id

        ids = await asyncio.gather(*(create(f"Category {n}") for n in range(6)))

        assert sorted(ids, reverse=True) == [0, -1, -2, -3, -4, -5]
        async with session_factory() as session:
            assert len(await CatalogService(session).list_categories()) == 6

    async def test_concurrent_same_category_creates_one_placeholder(
        self, session_factory
    ) -> None:
        """Only one of two simultaneous creates of a name succeeds."""

        async def create() -> int:
            async with session_factory() as session:
                placeholder = await CatalogService(session).create_category("Poetry")
                return placeholder.product_id

        outcomes = await asyncio.gather(create(), create(), return_exceptions=True)

        assert sum(isinstance(o, int) for o in outcomes) == 1
        assert sum(isinstance(o, CategoryAlreadyExistsError) for o in outcomes) == 1
        async with session_factory() as session:
            records = await CatalogService(session).list_all_records()
            assert [p.category for p in records] == ["Poetry"]


# ============================================================================
# Scenario
# ============================================================================


async def test_category_lifecycle_scenario(service: CatalogService, book_fields) -> None:
    """Create, fill, rename and delete a category on an empty catalog."""
    placeholder = await service.create_category("Fiction")
    assert placeholder.product_id == 0

    first = await service.create_product(book_fields(category="Fiction"))
    second = await service.create_product(book_fields(category="Fiction", title="Children of Dune"))
    assert (first.product_id, second.product_id) == (1, 2)

    moved = await service.rename_category("Fiction", "Novels")
    assert moved == 3
    records = await service.list_all_records()
    assert {p.product_id for p in records} == {0, 1, 2}
    assert {p.category for p in records} == {"Novels"}

    deleted = await service.delete_category("Novels")
    assert deleted == 3
    assert await service.list_all_records() == []
    assert await service.list_categories() == []


async def test_fields_report_missing_in_order() -> None:
    """Missing fields are reported in declaration order."""
    fields = ProductFields(title="Dune", price=" ")
    assert fields.missing() == ["author", "price", "category", "introduction", "img_url", "publisher"]
