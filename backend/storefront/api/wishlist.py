"""Wishlist routes."""

from fastapi import APIRouter

from storefront.api.dependencies import CurrentUserDep
from storefront.models.cart import (
    AddToWishlistRequest,
    AddToWishlistResponse,
    ItemCheckResponse,
    ItemCountResponse,
    MoveToCartResponse,
    Wishlist,
)
from storefront.services.wishlist_service import wishlist_service

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.get("", response_model=Wishlist)
async def get_wishlist(user: CurrentUserDep) -> Wishlist:
    return await wishlist_service.get_wishlist(user.id)


@router.delete("", response_model=Wishlist)
async def clear_wishlist(user: CurrentUserDep) -> Wishlist:
    return await wishlist_service.clear(user.id)


@router.get("/count", response_model=ItemCountResponse)
async def get_wishlist_count(user: CurrentUserDep) -> ItemCountResponse:
    return ItemCountResponse(count=await wishlist_service.item_count(user.id))


@router.get("/check/{product_id}", response_model=ItemCheckResponse)
async def check_in_wishlist(product_id: int, user: CurrentUserDep) -> ItemCheckResponse:
    return ItemCheckResponse(
        productId=product_id,
        inWishlist=await wishlist_service.is_in_wishlist(user.id, product_id),
    )


@router.post("/items", response_model=AddToWishlistResponse)
async def add_wishlist_item(item: AddToWishlistRequest, user: CurrentUserDep) -> AddToWishlistResponse:
    """Save a product; saving it twice reports ``added = false``."""
    wishlist, added = await wishlist_service.add_item(user.id, item)
    return AddToWishlistResponse(wishlist=wishlist, added=added)


@router.delete("/items/{product_id}", response_model=Wishlist)
async def remove_wishlist_item(product_id: int, user: CurrentUserDep) -> Wishlist:
    return await wishlist_service.remove_item(user.id, product_id)


@router.post("/move-to-cart/{product_id}", response_model=MoveToCartResponse)
async def move_to_cart(product_id: int, user: CurrentUserDep) -> MoveToCartResponse:
    cart, wishlist = await wishlist_service.move_to_cart(user.id, product_id)
    return MoveToCartResponse(cart=cart, wishlist=wishlist)
