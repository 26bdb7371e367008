"""Admin routes; every endpoint requires the admin role."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from storefront.api.dependencies import AdminUserDep, require_role
from storefront.models.admin import (
    AdminOrderFilters,
    AdminOrderItem,
    AdminOrderListResponse,
    DashboardStats,
    UserFilters,
)
from storefront.models.order import (
    BulkActionResponse,
    BulkUpdateStatusRequest,
    OrderInDB,
    UpdateOrderStatusRequest,
    UpdateTrackingRequest,
)
from storefront.models.user import (
    UpdateUserRoleRequest,
    UserDetailResponse,
    UserInDB,
    UserListResponse,
    UserRole,
)
from storefront.services.admin_service import admin_service
from storefront.services.order_service import order_service
from storefront.services.user_service import user_service

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_role(UserRole.ADMIN))],
)


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard() -> DashboardStats:
    """Store-wide rollups, recomputed on every request."""
    return await admin_service.get_dashboard_stats()


# ── Users ──────────────────────────────────────────────────────────────────


@router.get("/users", response_model=UserListResponse)
async def list_users(filters: Annotated[UserFilters, Query()]) -> UserListResponse:
    return await user_service.list_users(filters)


@router.get("/users/{user_id}", response_model=UserDetailResponse)
async def get_user(user_id: str) -> UserDetailResponse:
    return await user_service.get_user_detail(user_id)


@router.patch("/users/{user_id}/role", response_model=UserInDB)
async def update_user_role(user_id: str, body: UpdateUserRoleRequest, admin: AdminUserDep) -> UserInDB:
    return await user_service.update_role(admin.id, user_id, body.role)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, admin: AdminUserDep) -> None:
    await user_service.delete_user(admin.id, user_id)


# ── Orders ─────────────────────────────────────────────────────────────────


@router.get("/orders", response_model=AdminOrderListResponse)
async def list_orders(filters: Annotated[AdminOrderFilters, Query()]) -> AdminOrderListResponse:
    return await admin_service.list_orders(filters)


@router.post("/orders/bulk-update", response_model=BulkActionResponse)
async def bulk_update_orders(body: BulkUpdateStatusRequest) -> BulkActionResponse:
    """Apply one status to many orders; each order succeeds or fails on its own."""
    return await order_service.bulk_update_status(body.orderIds, body.status, body.note)


@router.get("/orders/{order_id}", response_model=AdminOrderItem)
async def get_order(order_id: str) -> AdminOrderItem:
    return await admin_service.get_order(order_id)


@router.patch("/orders/{order_id}/status", response_model=OrderInDB)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderInDB:
    return await order_service.update_status(order_id, body.status, body.note, body.trackingInfo)


@router.patch("/orders/{order_id}/tracking", response_model=OrderInDB)
async def update_order_tracking(order_id: str, body: UpdateTrackingRequest) -> OrderInDB:
    return await order_service.update_tracking(order_id, body.trackingInfo)
