"""
Create the schema if needed and seed the default access catalog.

The catalog is validated against the permission registry first; on any
mismatch nothing is written and the script exits non-zero.

Usage:
    python -m scripts.seed_catalog
"""
import asyncio
import logging
import sys

from classroom_access.database import AsyncSessionLocal, engine
from classroom_access.models import Base
from classroom_access.services.access.catalog_seeder import seed_catalog, validate_catalog

logger = logging.getLogger("classroom_access.seed")


async def main() -> int:
    try:
        validate_catalog()
    except ValueError as exc:
        logger.error("%s", exc)
        logger.error("Seeding aborted. Fix the catalog and run again.")
        return 1

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        summary = await seed_catalog(session)

    await engine.dispose()
    logger.info(
        "Seeding complete: %s permissions, %s groups, %s roles created, %s links added",
        summary.permissions_created,
        summary.groups_created,
        summary.roles_created,
        summary.links_created,
    )
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    sys.exit(asyncio.run(main()))
