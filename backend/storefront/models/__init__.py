"""Data models package."""

from storefront.models.admin import (
    AdminOrderItem,
    AdminOrderListResponse,
    DashboardStats,
    RecentOrderSummary,
    RevenueByMonth,
    TopProduct,
)
from storefront.models.cart import (
    AddToCartRequest,
    AddToWishlistRequest,
    Cart,
    CartItem,
    UpdateCartItemRequest,
    Wishlist,
    WishlistItem,
)
from storefront.models.order import (
    BulkActionResponse,
    BulkUpdateStatusRequest,
    OrderInDB,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    ShippingAddress,
    StatusHistoryEntry,
    TrackingInfo,
)
from storefront.models.request import ErrorResponse, HealthResponse, MessageResponse
from storefront.models.user import CurrentUser, UserInDB, UserRole

__all__ = [
    # User models
    "CurrentUser",
    "UserInDB",
    "UserRole",
    # Cart/wishlist models
    "Cart",
    "CartItem",
    "Wishlist",
    "WishlistItem",
    "AddToCartRequest",
    "AddToWishlistRequest",
    "UpdateCartItemRequest",
    # Order models
    "OrderInDB",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "ShippingAddress",
    "StatusHistoryEntry",
    "TrackingInfo",
    "BulkUpdateStatusRequest",
    "BulkActionResponse",
    # Admin models
    "DashboardStats",
    "RecentOrderSummary",
    "RevenueByMonth",
    "TopProduct",
    "AdminOrderItem",
    "AdminOrderListResponse",
    # Request/Response models
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
]
