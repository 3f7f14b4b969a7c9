"""Domain exceptions.

All catalog errors are raised as classified exceptions carrying an HTTP
status and a machine-readable error code. The API layer renders them
through a single exception handler.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    status_code: int = 500
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Invalid Argument Errors
# ============================================================================


class InvalidArgumentError(DomainError):
    """Raised when a required value is missing, blank or contradictory."""

    status_code = 400
    error_code = "INVALID_ARGUMENT"


class MissingFieldsError(InvalidArgumentError):
    """Raised when required fields are absent or blank."""

    def __init__(self, fields: list[str]) -> None:
        """Initialize missing fields error.

        Args:
            fields: Names of the missing fields.
        """
        super().__init__(
            f"Missing required fields: {', '.join(fields)}",
            details={"fields": fields},
        )
        self.fields = fields


class SameCategoryNameError(InvalidArgumentError):
    """Raised when a category rename keeps the same name."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"New category name must differ from '{name}'",
            details={"category": name},
        )


# ============================================================================
# Not Found Errors
# ============================================================================


class NotFoundError(DomainError):
    """Raised when a requested record or category does not exist."""

    status_code = 404
    error_code = "NOT_FOUND"


class ProductNotFoundError(NotFoundError):
    """Raised when no product has the given id."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: int) -> None:
        """Initialize product not found error.

        Args:
            product_id: The missing product id.
        """
        super().__init__(
            f"Book {product_id} not found",
            details={"product_id": product_id},
        )


class CategoryNotFoundError(NotFoundError):
    """Raised when a category name is not in the category index."""

    error_code = "CATEGORY_NOT_FOUND"

    def __init__(self, name: str) -> None:
        """Initialize category not found error.

        Args:
            name: The unknown category name.
        """
        super().__init__(
            f"Category '{name}' not found",
            details={"category": name},
        )


class EmptyCategoryError(NotFoundError):
    """Raised when a category exists but holds no real books."""

    error_code = "CATEGORY_EMPTY"

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Category '{name}' has no books",
            details={"category": name},
        )


# ============================================================================
# Conflict Errors
# ============================================================================


class ConflictError(DomainError):
    """Raised when a write would clash with existing state."""

    status_code = 409
    error_code = "CONFLICT"


class CategoryAlreadyExistsError(ConflictError):
    """Raised when creating or renaming onto a registered category."""

    error_code = "CATEGORY_EXISTS"

    def __init__(self, name: str) -> None:
        """Initialize category exists error.

        Args:
            name: The already registered category name.
        """
        super().__init__(
            f"Category '{name}' already exists",
            details={"category": name},
        )


# ============================================================================
# Internal Errors
# ============================================================================


class InternalError(DomainError):
    """Raised for unclassified failures below the domain layer."""

    status_code = 500
    error_code = "INTERNAL_ERROR"


class StorageError(InternalError):
    """Raised when the underlying storage call fails."""

    error_code = "STORAGE_ERROR"

    def __init__(self, operation: str, reason: str) -> None:
        """Initialize storage error.

        Args:
            operation: Catalog operation that failed.
            reason: Underlying error text.
        """
        super().__init__(
            f"Storage failure during {operation}",
            details={"operation": operation, "reason": reason},
        )


class IdAllocationError(InternalError):
    """Raised when a unique product id could not be allocated."""

    error_code = "ID_ALLOCATION_FAILED"

    def __init__(self, attempts: int) -> None:
        super().__init__(
            f"Could not allocate a unique product id after {attempts} attempts",
            details={"attempts": attempts},
        )
