"""Services package."""

from storefront.services.admin_service import AdminService, admin_service
from storefront.services.auth_service import AuthService, auth_service
from storefront.services.cart_service import CartService, cart_service
from storefront.services.catalog_service import ProductCatalog
from storefront.services.order_service import OrderService, calculate_totals, order_service
from storefront.services.payment_service import StripeGateway, payment_gateway
from storefront.services.user_service import UserService, user_service
from storefront.services.wishlist_service import WishlistService, wishlist_service

__all__ = [
    "AdminService",
    "admin_service",
    "AuthService",
    "auth_service",
    "CartService",
    "cart_service",
    "ProductCatalog",
    "OrderService",
    "order_service",
    "calculate_totals",
    "StripeGateway",
    "payment_gateway",
    "UserService",
    "user_service",
    "WishlistService",
    "wishlist_service",
]
