"""Domain layer.

Classified error taxonomy shared by the catalog and the API layer.
"""

from bookstore.domain.exceptions import (
    CategoryAlreadyExistsError,
    CategoryNotFoundError,
    ConflictError,
    DomainError,
    EmptyCategoryError,
    IdAllocationError,
    InternalError,
    InvalidArgumentError,
    MissingFieldsError,
    NotFoundError,
    ProductNotFoundError,
    SameCategoryNameError,
    StorageError,
)

__all__ = [
    "DomainError",
    # Invalid argument
    "InvalidArgumentError",
    "MissingFieldsError",
    "SameCategoryNameError",
    # Not found
    "NotFoundError",
    "ProductNotFoundError",
    "CategoryNotFoundError",
    "EmptyCategoryError",
    # Conflict
    "ConflictError",
    "CategoryAlreadyExistsError",
    # Internal
    "InternalError",
    "StorageError",
    "IdAllocationError",
]
