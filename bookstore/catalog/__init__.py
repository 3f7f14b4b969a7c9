"""Book catalog.

Provides product storage, product id allocation, the derived category
index and the catalog service used by the API layer.
"""

from bookstore.catalog.allocator import IdentifierAllocator
from bookstore.catalog.categories import CategoryIndex, CategorySummary
from bookstore.catalog.models import IdCounter, Product
from bookstore.catalog.repository import ProductRepository
from bookstore.catalog.service import CatalogService, ProductFields

__all__ = [
    # Models
    "IdCounter",
    "Product",
    # Allocation
    "IdentifierAllocator",
    # Repository
    "ProductRepository",
    # Categories
    "CategoryIndex",
    "CategorySummary",
    # Service
    "CatalogService",
    "ProductFields",
]
