"""Schema Bootstrap — creates mapped tables without Alembic.

Invariants:
    - Meant for local development and test fixtures; deployed databases use Alembic
"""

from sqlalchemy.ext.asyncio import AsyncEngine

from storefront.db.base import Base


async def create_all(engine: AsyncEngine) -> None:
    """Create every mapped table (local development and tests)."""
    import storefront.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
