"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.catalog.service import CatalogService
from bookstore.infrastructure.database import get_session


def get_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CatalogService:
    """Get catalog service bound to the request session.

    Service logs pick up the request ID from the structlog context bound by
    ``RequestIdMiddleware``.
    """
    return CatalogService(session)
