"""Book API endpoints.

Provides endpoints for browsing and administering books:
- GET /books - list all books
- GET /books/{product_id} - book details
- GET /admin/books - list every record, category placeholders included
- POST /admin/books - add a book
- PUT /admin/books/{product_id} - edit a book
- DELETE /admin/books/{product_id} - remove a book
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from bookstore.api.dependencies import get_service
from bookstore.api.schemas import (
    BookResponse,
    BookSchema,
    BooksResponse,
    BookWriteRequest,
    ErrorResponse,
    MessageResponse,
)
from bookstore.catalog.models import Product
from bookstore.catalog.service import CatalogService, ProductFields

router = APIRouter(prefix="/books", tags=["Books"])
admin_router = APIRouter(prefix="/admin/books", tags=["Admin: Books"])


# ============================================================================
# Converters
# ============================================================================


def to_fields(body: BookWriteRequest) -> ProductFields:
    """Convert a write request into service fields."""
    return ProductFields(**body.model_dump())


def to_schemas(products: list[Product]) -> list[BookSchema]:
    """Convert products into response schemas."""
    return [BookSchema.model_validate(product) for product in products]


# ============================================================================
# Public Endpoints
# ============================================================================


@router.get(
    "",
    response_model=BooksResponse,
    summary="List books",
    description="Get every book in the catalog. Category placeholders are excluded.",
)
async def list_books(
    service: Annotated[CatalogService, Depends(get_service)],
) -> BooksResponse:
    """List all books.

    Args:
        service: Catalog service.

    Returns:
        Books ordered by id.
    """
    products = await service.list_products()
    return BooksResponse(message="Books retrieved", data=to_schemas(products))


@router.get(
    "/{product_id}",
    response_model=BookResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get book",
)
async def get_book(
    product_id: int,
    service: Annotated[CatalogService, Depends(get_service)],
) -> BookResponse:
    """Get a book by id.

    Args:
        product_id: Book id.
        service: Catalog service.

    Returns:
        Book details.
    """
    product = await service.get_product(product_id)
    return BookResponse(message="Book retrieved", data=BookSchema.model_validate(product))


# ============================================================================
# Admin Endpoints
# ============================================================================


@admin_router.get(
    "",
    response_model=BooksResponse,
    summary="List all records",
    description="Get every product row, category placeholders included.",
)
async def list_all_records(
    service: Annotated[CatalogService, Depends(get_service)],
) -> BooksResponse:
    """List every product row."""
    products = await service.list_all_records()
    return BooksResponse(message="All records retrieved", data=to_schemas(products))


@admin_router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Add book",
)
async def create_book(
    body: BookWriteRequest,
    service: Annotated[CatalogService, Depends(get_service)],
) -> BookResponse:
    """Add a book.

    The server allocates the book id and, unless given, the badge flags.

    Args:
        body: Book fields.
        service: Catalog service.

    Returns:
        The stored book.
    """
    product = await service.create_product(to_fields(body))
    return BookResponse(message="Book created", data=BookSchema.model_validate(product))


@admin_router.put(
    "/{product_id}",
    response_model=BookResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Edit book",
)
async def update_book(
    product_id: int,
    body: BookWriteRequest,
    service: Annotated[CatalogService, Depends(get_service)],
) -> BookResponse:
    """Overwrite a book's fields.

    Args:
        product_id: Book id.
        body: New book fields.
        service: Catalog service.

    Returns:
        The updated book.
    """
    product = await service.update_product(product_id, to_fields(body))
    return BookResponse(message="Book updated", data=BookSchema.model_validate(product))


@admin_router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Delete book",
)
async def delete_book(
    product_id: int,
    service: Annotated[CatalogService, Depends(get_service)],
) -> MessageResponse:
    """Remove a book."""
    await service.delete_product(product_id)
    return MessageResponse(message="Book deleted")
