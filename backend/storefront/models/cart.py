"""Cart and wishlist data models."""

from datetime import datetime

from pydantic import BaseModel, Field

from storefront.models.common import MongoModel, ObjectIdStr
from storefront.utils.helpers import round_money, utcnow


class CartItem(BaseModel):
    """Line item in a cart, with the unit price at time of adding."""

    productId: int = Field(..., description="Catalog product ID")
    quantity: int = Field(1, ge=1, description="Quantity in cart")
    price: float = Field(..., ge=0, description="Unit price snapshot")
    title: str = Field(..., min_length=1)
    thumbnail: str = Field(..., min_length=1)
    addedAt: datetime = Field(default_factory=utcnow)


class Cart(MongoModel):
    """Per-user shopping cart."""

    userId: ObjectIdStr
    items: list[CartItem] = Field(default_factory=list)
    totalItems: int = 0
    totalPrice: float = 0.0
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)

    def calculate_totals(self) -> None:
        """Recompute derived totals from the items."""
        self.totalItems = sum(item.quantity for item in self.items)
        self.totalPrice = round_money(sum(item.price * item.quantity for item in self.items))

    def find_item(self, product_id: int) -> CartItem | None:
        return next((item for item in self.items if item.productId == product_id), None)


class WishlistItem(BaseModel):
    """Saved product in a wishlist."""

    productId: int = Field(..., description="Catalog product ID")
    title: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    thumbnail: str = Field(..., min_length=1)
    addedAt: datetime = Field(default_factory=utcnow)


class Wishlist(MongoModel):
    """Per-user wishlist."""

    userId: ObjectIdStr
    items: list[WishlistItem] = Field(default_factory=list)
    totalItems: int = 0
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)

    def calculate_totals(self) -> None:
        self.totalItems = len(self.items)

    def find_item(self, product_id: int) -> WishlistItem | None:
        return next((item for item in self.items if item.productId == product_id), None)


class AddToCartRequest(BaseModel):
    """Add-to-cart request body."""

    productId: int = Field(..., ge=1)
    quantity: int = Field(1, ge=1)
    price: float = Field(..., gt=0)
    title: str = Field(..., min_length=1)
    thumbnail: str = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {
            "example": {
                "productId": 1,
                "quantity": 2,
                "price": 9.99,
                "title": "Essence Mascara Lash Princess",
                "thumbnail": "https://cdn.dummyjson.com/products/images/beauty/1/thumbnail.png",
            }
        }
    }


class UpdateCartItemRequest(BaseModel):
    """Quantity update; zero or less removes the item."""

    quantity: int


class AddToWishlistRequest(BaseModel):
    """Add-to-wishlist request body."""

    productId: int = Field(..., ge=1)
    price: float = Field(..., gt=0)
    title: str = Field(..., min_length=1)
    thumbnail: str = Field(..., min_length=1)


class AddToWishlistResponse(BaseModel):
    """Wishlist after an add, and whether the item was new."""

    wishlist: Wishlist
    added: bool


class MoveToCartResponse(BaseModel):
    """Cart and wishlist after moving an item between them."""

    cart: Cart
    wishlist: Wishlist


class ItemCheckResponse(BaseModel):
    productId: int
    inCart: bool | None = None
    inWishlist: bool | None = None


class ItemCountResponse(BaseModel):
    count: int
