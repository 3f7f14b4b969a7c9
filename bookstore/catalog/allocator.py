"""Product id allocation.

Real books get ids 1, 2, 3, ... and category placeholders get ids
0, -1, -2, ... Each range is backed by a counter row that is advanced
with a single atomic ``UPDATE ... RETURNING`` so concurrent writers are
serialized by the database instead of racing on ``max()``/``min()``.
"""

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.catalog.models import IdCounter
from bookstore.catalog.repository import ProductRepository

logger = structlog.get_logger()

REAL_COUNTER = "real"
PLACEHOLDER_COUNTER = "placeholder"


class IdentifierAllocator:
    """Allocates product ids for books and category placeholders.

    The first allocation in a range seeds its counter from the extremum
    stored in the products table; afterwards ids come from the counter and
    are never reused, even after deletes. Two writers seeding the same
    counter at once make one flush fail with ``IntegrityError``, which the
    service handles by rolling back, calling :meth:`resync` and retrying.
    """

    def __init__(self, session: AsyncSession, repository: ProductRepository | None = None) -> None:
        """Initialize allocator.

        Args:
            session: Async SQLAlchemy session.
            repository: Product repository used to read id extremes.
        """
        self.session = session
        self.repository = repository or ProductRepository(session)

    async def next_real_id(self) -> int:
        """Allocate the next real book id.

        Returns:
            ``max(product_id) + 1`` over real books on first use (``1`` for
            an empty catalog), then one more than the last allocated id.
        """
        allocated = await self._advance(REAL_COUNTER, 1)
        if allocated is None:
            highest = await self.repository.max_real_id()
            allocated = (highest or 0) + 1
            await self._seed(REAL_COUNTER, allocated)
        return allocated

    async def next_placeholder_id(self) -> int:
        """Allocate the next category placeholder id.

        Returns:
            ``min(product_id) - 1`` over placeholders on first use (``0``
            when there are none), then one less than the last allocated id.
        """
        allocated = await self._advance(PLACEHOLDER_COUNTER, -1)
        if allocated is None:
            lowest = await self.repository.min_placeholder_id()
            allocated = 0 if lowest is None else lowest - 1
            await self._seed(PLACEHOLDER_COUNTER, allocated)
        return allocated

    async def resync(self) -> None:
        """Move both counters past the ids already stored in products.

        Used before retrying an insert that hit a uniqueness conflict, so
        the retry works from a freshly recomputed candidate.
        """
        highest = await self.repository.max_real_id()
        if highest is not None:
            await self.session.execute(
                update(IdCounter)
                .where(IdCounter.name == REAL_COUNTER, IdCounter.value < highest)
                .values(value=highest)
                .execution_options(synchronize_session=False)
            )

        lowest = await self.repository.min_placeholder_id()
        if lowest is not None:
            await self.session.execute(
                update(IdCounter)
                .where(IdCounter.name == PLACEHOLDER_COUNTER, IdCounter.value > lowest)
                .values(value=lowest)
                .execution_options(synchronize_session=False)
            )

        logger.info("Id counters resynced", max_real_id=highest, min_placeholder_id=lowest)

    async def _advance(self, name: str, step: int) -> int | None:
        # Increment-and-fetch; None when the counter row does not exist yet
        result = await self.session.execute(
            update(IdCounter)
            .where(IdCounter.name == name)
            .values(value=IdCounter.value + step)
            .returning(IdCounter.value)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none()

    async def _seed(self, name: str, value: int) -> None:
        self.session.add(IdCounter(name=name, value=value))
        await self.session.flush()
        logger.info("Id counter seeded", counter=name, value=value)
