"""Demo catalog data.

Seeds a small set of categories and books through the catalog service so
that allocation and category rules apply exactly as for admin requests.
"""

from typing import Any

import structlog

from bookstore.catalog.service import CatalogService, ProductFields

logger = structlog.get_logger()

DEMO_BOOKS: list[dict[str, str]] = [
    {
        "title": "The Left Hand of Darkness",
        "author": "Ursula K. Le Guin",
        "price": "15000",
        "category": "Fiction",
        "introduction": "An envoy visits a planet whose people have no fixed sex.",
        "img_url": "https://covers.example.com/left-hand-of-darkness.jpg",
        "publisher": "Ace Books",
    },
    {
        "title": "Kindred",
        "author": "Octavia E. Butler",
        "price": "13500",
        "category": "Fiction",
        "introduction": "A writer is pulled back in time to antebellum Maryland.",
        "img_url": "https://covers.example.com/kindred.jpg",
        "publisher": "Doubleday",
    },
    {
        "title": "Structure and Interpretation of Computer Programs",
        "author": "Harold Abelson, Gerald Jay Sussman",
        "price": "42000",
        "category": "Computing",
        "introduction": "Classic introduction to programming and abstraction.",
        "img_url": "https://covers.example.com/sicp.jpg",
        "publisher": "MIT Press",
    },
    {
        "title": "Designing Data-Intensive Applications",
        "author": "Martin Kleppmann",
        "price": "38000",
        "category": "Computing",
        "introduction": "Reliable, scalable and maintainable data systems.",
        "img_url": "https://covers.example.com/ddia.jpg",
        "publisher": "O'Reilly Media",
    },
    {
        "title": "A Short History of Nearly Everything",
        "author": "Bill Bryson",
        "price": "18000",
        "category": "Science",
        "introduction": "A tour of how we came to know what we know.",
        "img_url": "https://covers.example.com/short-history.jpg",
        "publisher": "Broadway Books",
    },
]

DEMO_EMPTY_CATEGORIES: list[str] = ["Poetry"]


async def seed_catalog(service: CatalogService, clear_existing: bool = True) -> dict[str, Any]:
    """Seed demo categories and books.

    Args:
        service: Catalog service bound to an open session.
        clear_existing: Delete every existing category (and its books) first.

    Returns:
        Seeding result with counts.
    """
    deleted = 0
    if clear_existing:
        for name in await service.list_categories():
            deleted += await service.delete_category(name)

    existing = set(await service.list_categories())
    categories_created = 0
    for name in DEMO_EMPTY_CATEGORIES:
        if name not in existing:
            await service.create_category(name)
            categories_created += 1

    books = [await service.create_product(ProductFields(**book)) for book in DEMO_BOOKS]

    result = {
        "deleted": deleted,
        "books_created": len(books),
        "empty_categories_created": categories_created,
        "categories": await service.list_categories(),
    }
    logger.info("Catalog seeded", **result)
    return result
