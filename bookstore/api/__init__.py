"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from bookstore.api.books import admin_router as admin_books_router
from bookstore.api.books import router as books_router
from bookstore.api.categories import admin_router as admin_categories_router
from bookstore.api.categories import router as categories_router
from bookstore.api.health import router as health_router

__all__ = [
    "admin_books_router",
    "admin_categories_router",
    "books_router",
    "categories_router",
    "health_router",
]
