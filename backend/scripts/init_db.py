"""Database initialization script: connects and creates indexes."""

import asyncio
import logging

from storefront.database.mongodb import mongodb
from storefront.utils.logger import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


async def init_database() -> None:
    """Create the storefront's MongoDB indexes."""
    try:
        logger.info("Initializing database...")

        # connect() creates the indexes
        await mongodb.connect()

        for name in ("carts", "wishlists", "orders"):
            indexes = await getattr(mongodb, name).index_information()
            logger.info("Collection %s indexes: %s", name, sorted(indexes))

        logger.info("Database initialization completed successfully")

    except Exception as e:
        logger.error("Error initializing database: %s", e)
        raise

    finally:
        await mongodb.disconnect()


if __name__ == "__main__":
    asyncio.run(init_database())
