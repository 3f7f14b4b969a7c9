"""Category API endpoints.

Provides endpoints for the category taxonomy:
- GET /categories - list category names
- GET /categories/{name}/books - books in a category
- GET /admin/categories - categories with book counts
- POST /admin/categories - create an empty category
- PATCH /admin/categories/{name} - rename a category
- DELETE /admin/categories/{name} - delete a category and its books
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from bookstore.api.books import to_schemas
from bookstore.api.dependencies import get_service
from bookstore.api.schemas import (
    BooksResponse,
    CategoriesResponse,
    CategoryCreateRequest,
    CategoryRenameRequest,
    CategorySummariesResponse,
    CategorySummarySchema,
    CategoryWriteResponse,
    CategoryWriteResult,
    ErrorResponse,
)
from bookstore.catalog.service import CatalogService

router = APIRouter(prefix="/categories", tags=["Categories"])
admin_router = APIRouter(prefix="/admin/categories", tags=["Admin: Categories"])


# ============================================================================
# Public Endpoints
# ============================================================================


@router.get(
    "",
    response_model=CategoriesResponse,
    summary="List categories",
)
async def list_categories(
    service: Annotated[CatalogService, Depends(get_service)],
) -> CategoriesResponse:
    """List category names, including categories without books."""
    categories = await service.list_categories()
    return CategoriesResponse(message="Categories retrieved", data=categories)


@router.get(
    "/{name}/books",
    response_model=BooksResponse,
    responses={404: {"model": ErrorResponse}},
    summary="List books in category",
    description="Get the books of a category. Unknown and empty categories return 404.",
)
async def list_category_books(
    name: str,
    service: Annotated[CatalogService, Depends(get_service)],
) -> BooksResponse:
    """List books in a category.

    Args:
        name: Category name.
        service: Catalog service.

    Returns:
        Books ordered by id.
    """
    products = await service.list_products_by_category(name)
    return BooksResponse(message=f"Books in '{name}' retrieved", data=to_schemas(products))


# ============================================================================
# Admin Endpoints
# ============================================================================


@admin_router.get(
    "",
    response_model=CategorySummariesResponse,
    summary="List categories with counts",
)
async def list_category_summaries(
    service: Annotated[CatalogService, Depends(get_service)],
) -> CategorySummariesResponse:
    """List categories with their book counts."""
    summaries = await service.get_category_summaries()
    return CategorySummariesResponse(
        message="Category summaries retrieved",
        data=[CategorySummarySchema.model_validate(s) for s in summaries],
    )


@admin_router.post(
    "",
    response_model=CategoryWriteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Create category",
)
async def create_category(
    body: CategoryCreateRequest,
    service: Annotated[CatalogService, Depends(get_service)],
) -> CategoryWriteResponse:
    """Create an empty category.

    Args:
        body: Category name.
        service: Catalog service.

    Returns:
        The new category and its placeholder id.
    """
    placeholder = await service.create_category(body.name)
    return CategoryWriteResponse(
        message="Category created",
        data=CategoryWriteResult(
            category=placeholder.category,
            affected=1,
            placeholder_id=placeholder.product_id,
        ),
    )


@admin_router.patch(
    "/{name}",
    response_model=CategoryWriteResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Rename category",
)
async def rename_category(
    name: str,
    body: CategoryRenameRequest,
    service: Annotated[CatalogService, Depends(get_service)],
) -> CategoryWriteResponse:
    """Rename a category on all of its books.

    Args:
        name: Current category name.
        body: New category name.
        service: Catalog service.

    Returns:
        The new name and the number of moved rows.
    """
    moved = await service.rename_category(name, body.new_name)
    return CategoryWriteResponse(
        message="Category renamed",
        data=CategoryWriteResult(category=body.new_name, affected=moved),
    )


@admin_router.delete(
    "/{name}",
    response_model=CategoryWriteResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Delete category",
    description="Delete a category together with every book in it.",
)
async def delete_category(
    name: str,
    service: Annotated[CatalogService, Depends(get_service)],
) -> CategoryWriteResponse:
    """Delete a category and its books."""
    deleted = await service.delete_category(name)
    return CategoryWriteResponse(
        message="Category deleted",
        data=CategoryWriteResult(category=name, affected=deleted),
    )
