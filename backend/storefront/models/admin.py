"""Admin dashboard and order management models."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from storefront.models.common import ObjectIdStr
from storefront.models.order import OrderInDB, OrderStatus
from storefront.models.user import UserRole


class RecentOrderSummary(BaseModel):
    id: ObjectIdStr = Field(..., alias="_id")
    userId: ObjectIdStr
    userName: Optional[str] = None
    userEmail: Optional[str] = None
    totalPrice: float
    orderStatus: OrderStatus
    createdAt: datetime
    itemCount: int

    model_config = {"populate_by_name": True}


class RevenueByMonth(BaseModel):
    month: str = Field(..., description="Calendar month as YYYY-MM")
    revenue: float
    orderCount: int


class TopProduct(BaseModel):
    productId: int
    title: str
    thumbnail: str
    totalSold: int
    totalRevenue: float


class DashboardStats(BaseModel):
    """Rollups recomputed from orders and users on every request."""

    totalUsers: int
    totalOrders: int
    totalRevenue: float
    pendingOrders: int
    processingOrders: int
    shippedOrders: int
    deliveredOrders: int
    cancelledOrders: int
    recentOrders: list[RecentOrderSummary]
    ordersByStatus: dict[OrderStatus, int]
    revenueByMonth: list[RevenueByMonth]
    topProducts: list[TopProduct]
    newUsersToday: int
    ordersToday: int
    revenueToday: float


class AdminOrderItem(OrderInDB):
    """Order enriched with its owner's name and email."""

    userName: Optional[str] = None
    userEmail: Optional[str] = None


class AdminOrderListResponse(BaseModel):
    orders: list[AdminOrderItem]
    total: int
    page: int
    pages: int


class UserFilters(BaseModel):
    """Admin user list query."""

    search: Optional[str] = Field(None, description="Case-insensitive name or email match")
    role: Optional[UserRole] = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)
    sortBy: Literal["createdAt", "name", "email"] = "createdAt"
    order: Literal["asc", "desc"] = "desc"


class AdminOrderFilters(BaseModel):
    """Admin order list query."""

    status: Optional[OrderStatus] = None
    userId: Optional[str] = None
    search: Optional[str] = Field(None, description="Order id, or user name/email fragment")
    dateFrom: Optional[datetime] = None
    dateTo: Optional[datetime] = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)
    sortBy: Literal["createdAt", "totalPrice", "orderStatus"] = "createdAt"
    order: Literal["asc", "desc"] = "desc"
