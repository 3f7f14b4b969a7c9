"""API schemas for the bookstore API.

Pydantic models for request/response validation and serialization.
JSON field names are camelCase; requests also accept snake_case.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | list[Any] = Field(
        default_factory=dict, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class MessageResponse(BaseModel):
    """Envelope for operations that return no data."""

    message: str = Field(..., description="Human-readable result message")
    data: None = Field(default=None, description="Always null")


# ============================================================================
# Book Schemas
# ============================================================================


class BookSchema(CamelModel):
    """A stored book or category placeholder."""

    product_id: int = Field(..., description="Product id (> 0 book, <= 0 category placeholder)")
    title: str
    author: str
    price: str
    category: str
    introduction: str
    img_url: str
    publisher: str
    best_seller: bool
    new_book: bool
    recommend: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BookWriteRequest(CamelModel):
    """Request to create or update a book.

    Every descriptive field is required by the catalog service, which
    reports missing ones as a single 400 error.
    """

    title: str | None = Field(default=None, description="Book title")
    author: str | None = Field(default=None, description="Author name")
    price: str | None = Field(default=None, description="Price; numbers are accepted")
    category: str | None = Field(default=None, description="Category name")
    introduction: str | None = Field(default=None, description="Introduction text")
    img_url: str | None = Field(default=None, description="Cover image URL")
    publisher: str | None = Field(default=None, description="Publisher name")
    best_seller: bool | None = Field(default=None, description="Best-seller badge; assigned by the server if omitted")
    new_book: bool | None = Field(default=None, description="New-arrival badge; assigned by the server if omitted")
    recommend: bool | None = Field(default=None, description="Recommended badge; assigned by the server if omitted")

    @field_validator("price", mode="before")
    @classmethod
    def price_as_text(cls, value: Any) -> Any:
        """Accept numeric prices and store them as text."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class BookResponse(BaseModel):
    """Envelope with a single book."""

    message: str
    data: BookSchema


class BooksResponse(BaseModel):
    """Envelope with a list of books."""

    message: str
    data: list[BookSchema]


# ============================================================================
# Category Schemas
# ============================================================================


class CategoryCreateRequest(CamelModel):
    """Request to create an empty category."""

    name: str | None = Field(default=None, description="Category name")


class CategoryRenameRequest(CamelModel):
    """Request to rename a category."""

    new_name: str | None = Field(default=None, description="New category name")


class CategoriesResponse(BaseModel):
    """Envelope with category names."""

    message: str
    data: list[str]


class CategorySummarySchema(CamelModel):
    """Category with its book count."""

    name: str
    book_count: int
    has_placeholder: bool


class CategorySummariesResponse(BaseModel):
    """Envelope with category summaries."""

    message: str
    data: list[CategorySummarySchema]


class CategoryWriteResult(CamelModel):
    """Outcome of a category write."""

    category: str = Field(..., description="Category name after the operation")
    affected: int = Field(..., description="Number of product rows touched")
    placeholder_id: int | None = Field(default=None, description="Placeholder id for a new category")


class CategoryWriteResponse(BaseModel):
    """Envelope with a category write outcome."""

    message: str
    data: CategoryWriteResult
