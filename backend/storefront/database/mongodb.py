"""MongoDB database connection and collections."""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import DESCENDING
from pymongo.errors import ConnectionFailure

from storefront.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class MongoDB:
    """MongoDB connection manager."""

    def __init__(self) -> None:
        """Initialize MongoDB connection."""
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self) -> None:
        """Connect to MongoDB."""
        try:
            self.client = AsyncIOMotorClient(
                settings.mongodb_url,
                maxPoolSize=settings.mongodb_max_pool_size,
                minPoolSize=settings.mongodb_min_pool_size,
            )
            self.db = self.client[settings.mongodb_database]

            # Test connection
            await self.client.admin.command("ping")
            logger.info("Connected to MongoDB: %s", settings.mongodb_database)

            # Create indexes
            await self.create_indexes()

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB: %s", e)
            raise

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("Disconnected from MongoDB")

    async def create_indexes(self) -> None:
        """Create database indexes.

        The user and session collections are indexed by the auth provider.
        """
        if self.db is None:
            raise ConnectionError("Database not connected")

        await self.carts.create_index("userId", unique=True, name="userId_unique")
        await self.wishlists.create_index("userId", unique=True, name="userId_unique")

        # paymentIntentId is the confirmation idempotency key
        await self.orders.create_index(
            "paymentIntentId", unique=True, name="paymentIntentId_unique"
        )
        await self.orders.create_index("userId", name="userId_index")
        await self.orders.create_index("paymentStatus", name="paymentStatus_index")
        await self.orders.create_index("orderStatus", name="orderStatus_index")
        await self.orders.create_index([("createdAt", DESCENDING)], name="createdAt_desc")
        logger.info("MongoDB indexes created")

    def _collection(self, name: str) -> AsyncIOMotorCollection:
        if self.db is None:
            raise ConnectionError("Database not connected")
        return self.db[name]

    @property
    def users(self) -> AsyncIOMotorCollection:
        return self._collection(settings.mongodb_user_collection)

    @property
    def sessions(self) -> AsyncIOMotorCollection:
        return self._collection(settings.mongodb_session_collection)

    @property
    def carts(self) -> AsyncIOMotorCollection:
        return self._collection(settings.mongodb_cart_collection)

    @property
    def wishlists(self) -> AsyncIOMotorCollection:
        return self._collection(settings.mongodb_wishlist_collection)

    @property
    def orders(self) -> AsyncIOMotorCollection:
        return self._collection(settings.mongodb_order_collection)


# Global MongoDB instance
mongodb = MongoDB()
