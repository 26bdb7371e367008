"""Wishlist service for per-user saved products."""

import logging

from pymongo import ReturnDocument

from storefront.database.mongodb import mongodb
from storefront.errors import NotFoundError
from storefront.models.cart import AddToCartRequest, AddToWishlistRequest, Cart, Wishlist, WishlistItem
from storefront.services.cart_service import cart_service
from storefront.utils.helpers import utcnow

logger = logging.getLogger(__name__)


class WishlistService:
    """Wishlist operations."""

    @staticmethod
    async def get_wishlist(user_id: str) -> Wishlist:
        """Get the user's wishlist, creating an empty one on first access."""
        now = utcnow()
        doc = await mongodb.wishlists.find_one_and_update(
            {"userId": user_id},
            {
                "$setOnInsert": {
                    "userId": user_id,
                    "items": [],
                    "totalItems": 0,
                    "createdAt": now,
                    "updatedAt": now,
                }
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return Wishlist.model_validate(doc)

    @staticmethod
    async def _save(wishlist: Wishlist) -> Wishlist:
        wishlist.calculate_totals()
        wishlist.updatedAt = utcnow()
        await mongodb.wishlists.update_one(
            {"userId": wishlist.userId},
            {
                "$set": {
                    "items": [item.model_dump() for item in wishlist.items],
                    "totalItems": wishlist.totalItems,
                    "updatedAt": wishlist.updatedAt,
                }
            },
        )
        return wishlist

    async def add_item(self, user_id: str, item: AddToWishlistRequest) -> tuple[Wishlist, bool]:
        """Add an item; a product already present is left as is.

        Returns:
            The wishlist and whether the item was newly added.
        """
        wishlist = await self.get_wishlist(user_id)
        if wishlist.find_item(item.productId):
            return wishlist, False

        wishlist.items.append(WishlistItem(**item.model_dump()))
        return await self._save(wishlist), True

    async def remove_item(self, user_id: str, product_id: int) -> Wishlist:
        wishlist = await self.get_wishlist(user_id)
        existing = wishlist.find_item(product_id)
        if existing is None:
            raise NotFoundError("Wishlist item", product_id)

        wishlist.items.remove(existing)
        return await self._save(wishlist)

    async def clear(self, user_id: str) -> Wishlist:
        wishlist = await self.get_wishlist(user_id)
        wishlist.items = []
        return await self._save(wishlist)

    async def is_in_wishlist(self, user_id: str, product_id: int) -> bool:
        wishlist = await self.get_wishlist(user_id)
        return wishlist.find_item(product_id) is not None

    async def item_count(self, user_id: str) -> int:
        wishlist = await self.get_wishlist(user_id)
        return wishlist.totalItems

    async def move_to_cart(self, user_id: str, product_id: int) -> tuple[Cart, Wishlist]:
        """Move a wishlist item into the cart with quantity 1."""
        wishlist = await self.get_wishlist(user_id)
        existing = wishlist.find_item(product_id)
        if existing is None:
            raise NotFoundError("Wishlist item", product_id)

        # Cart first, so a failed cart write leaves the wishlist untouched
        cart = await cart_service.add_item(
            user_id,
            AddToCartRequest(
                productId=existing.productId,
                quantity=1,
                price=existing.price,
                title=existing.title,
                thumbnail=existing.thumbnail,
            ),
        )

        wishlist.items.remove(existing)
        wishlist = await self._save(wishlist)
        logger.info("User %s moved product %s from wishlist to cart", user_id, product_id)
        return cart, wishlist


# Global wishlist service instance
wishlist_service = WishlistService()
