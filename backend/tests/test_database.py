"""Tests for index creation on the collections this service owns."""

from storefront.config import get_settings
from storefront.database.mongodb import mongodb

settings = get_settings()


class TestIndexes:
    async def test_owned_collections_are_indexed(self, db):
        await mongodb.create_indexes()

        orders = db.sync[settings.mongodb_order_collection].index_information()
        carts = db.sync[settings.mongodb_cart_collection].index_information()
        assert orders["paymentIntentId_unique"]["unique"] is True
        assert carts["userId_unique"]["unique"] is True

    async def test_auth_provider_collections_are_left_alone(self, db):
        await mongodb.create_indexes()

        sessions = db.sync[settings.mongodb_session_collection].index_information()
        users = db.sync[settings.mongodb_user_collection].index_information()
        assert set(sessions) <= {"_id_"}
        assert set(users) <= {"_id_"}
