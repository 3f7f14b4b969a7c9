#!/usr/bin/env python3
"""Seed book catalog script.

Creates tables and seeds demo categories and books.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --no-clear
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from bookstore.catalog.seed import seed_catalog
from bookstore.catalog.service import CatalogService
from bookstore.infrastructure.database import async_session_factory, engine, init_models
from bookstore.infrastructure.logging_config import configure_logging


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the book catalog with demo data",
    )
    parser.add_argument(
        "--no-clear",
        action="store_true",
        help="Don't delete existing categories and books before seeding",
    )

    args = parser.parse_args()
    configure_logging(json_output=False)

    print("=" * 60)
    print("Bookstore Catalog Seeder")
    print("=" * 60)
    print(f"Clear existing: {not args.no_clear}")
    print()

    print("Creating database tables...")
    await init_models()
    print("Tables ready.")
    print()

    try:
        async with async_session_factory() as session:
            service = CatalogService(session)
            result = await seed_catalog(service, clear_existing=not args.no_clear)
    finally:
        await engine.dispose()

    print(f"  ✓ Deleted: {result['deleted']} existing rows")
    print(f"  ✓ Created: {result['books_created']} books")
    print(f"  ✓ Empty categories: {result['empty_categories_created']}")
    print(f"  ✓ Categories: {', '.join(result['categories'])}")
    print()
    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
