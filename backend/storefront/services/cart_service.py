"""Cart service for per-user shopping carts."""

import logging

from pymongo import ReturnDocument

from storefront.database.mongodb import mongodb
from storefront.errors import NotFoundError
from storefront.models.cart import AddToCartRequest, Cart, CartItem
from storefront.utils.helpers import utcnow

logger = logging.getLogger(__name__)


class CartService:
    """Cart operations; every mutation recomputes totals before saving."""

    @staticmethod
    async def get_cart(user_id: str) -> Cart:
        """Get the user's cart, creating an empty one on first access."""
        now = utcnow()
        doc = await mongodb.carts.find_one_and_update(
            {"userId": user_id},
            {
                "$setOnInsert": {
                    "userId": user_id,
                    "items": [],
                    "totalItems": 0,
                    "totalPrice": 0.0,
                    "createdAt": now,
                    "updatedAt": now,
                }
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return Cart.model_validate(doc)

    @staticmethod
    async def _save(cart: Cart) -> Cart:
        cart.calculate_totals()
        cart.updatedAt = utcnow()
        await mongodb.carts.update_one(
            {"userId": cart.userId},
            {
                "$set": {
                    "items": [item.model_dump() for item in cart.items],
                    "totalItems": cart.totalItems,
                    "totalPrice": cart.totalPrice,
                    "updatedAt": cart.updatedAt,
                }
            },
        )
        return cart

    async def add_item(self, user_id: str, item: AddToCartRequest) -> Cart:
        """Add an item; an existing product gets its quantity increased and price refreshed."""
        cart = await self.get_cart(user_id)
        existing = cart.find_item(item.productId)

        if existing:
            existing.quantity += item.quantity
            existing.price = item.price
        else:
            cart.items.append(CartItem(**item.model_dump()))

        logger.info("User %s added product %s x%d to cart", user_id, item.productId, item.quantity)
        return await self._save(cart)

    async def update_item(self, user_id: str, product_id: int, quantity: int) -> Cart:
        """Set an item's quantity; zero or less removes it."""
        cart = await self.get_cart(user_id)
        existing = cart.find_item(product_id)
        if existing is None:
            raise NotFoundError("Cart item", product_id)

        if quantity <= 0:
            cart.items.remove(existing)
        else:
            existing.quantity = quantity

        return await self._save(cart)

    async def remove_item(self, user_id: str, product_id: int) -> Cart:
        """Remove an item from the cart."""
        cart = await self.get_cart(user_id)
        existing = cart.find_item(product_id)
        if existing is None:
            raise NotFoundError("Cart item", product_id)

        cart.items.remove(existing)
        return await self._save(cart)

    async def clear(self, user_id: str) -> Cart:
        """Remove every item from the cart."""
        cart = await self.get_cart(user_id)
        cart.items = []
        return await self._save(cart)

    async def is_in_cart(self, user_id: str, product_id: int) -> bool:
        cart = await self.get_cart(user_id)
        return cart.find_item(product_id) is not None

    async def item_count(self, user_id: str) -> int:
        cart = await self.get_cart(user_id)
        return cart.totalItems


# Global cart service instance
cart_service = CartService()
