"""Shopping cart routes."""

from fastapi import APIRouter

from storefront.api.dependencies import CurrentUserDep
from storefront.models.cart import (
    AddToCartRequest,
    Cart,
    ItemCheckResponse,
    ItemCountResponse,
    UpdateCartItemRequest,
)
from storefront.services.cart_service import cart_service

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=Cart)
async def get_cart(user: CurrentUserDep) -> Cart:
    return await cart_service.get_cart(user.id)


@router.delete("", response_model=Cart)
async def clear_cart(user: CurrentUserDep) -> Cart:
    return await cart_service.clear(user.id)


@router.get("/count", response_model=ItemCountResponse)
async def get_cart_count(user: CurrentUserDep) -> ItemCountResponse:
    return ItemCountResponse(count=await cart_service.item_count(user.id))


@router.get("/check/{product_id}", response_model=ItemCheckResponse)
async def check_in_cart(product_id: int, user: CurrentUserDep) -> ItemCheckResponse:
    return ItemCheckResponse(productId=product_id, inCart=await cart_service.is_in_cart(user.id, product_id))


@router.post("/items", response_model=Cart)
async def add_cart_item(item: AddToCartRequest, user: CurrentUserDep) -> Cart:
    """Add a product, or increase its quantity when already in the cart."""
    return await cart_service.add_item(user.id, item)


@router.put("/items/{product_id}", response_model=Cart)
async def update_cart_item(product_id: int, body: UpdateCartItemRequest, user: CurrentUserDep) -> Cart:
    """Set an item's quantity; zero or less removes it."""
    return await cart_service.update_item(user.id, product_id, body.quantity)


@router.delete("/items/{product_id}", response_model=Cart)
async def remove_cart_item(product_id: int, user: CurrentUserDep) -> Cart:
    return await cart_service.remove_item(user.id, product_id)
