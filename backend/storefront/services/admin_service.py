"""Admin service: dashboard rollups and cross-user order management."""

import asyncio
import logging
import math
import re
from typing import Any, Iterable

from pymongo import ASCENDING, DESCENDING

from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.models.admin import (
    AdminOrderFilters,
    AdminOrderItem,
    AdminOrderListResponse,
    DashboardStats,
    RecentOrderSummary,
    RevenueByMonth,
    TopProduct,
)
from storefront.models.order import OrderStatus, PaymentStatus
from storefront.services.order_service import order_service
from storefront.utils.helpers import month_start, naive_utc, round_money, to_object_id, utcnow

logger = logging.getLogger(__name__)
settings = get_settings()

RECENT_ORDERS = 10
PAID = {"paymentStatus": PaymentStatus.PAID.value}
OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


async def _sum_total_price(match: dict[str, Any]) -> float:
    rows = await mongodb.orders.aggregate(
        [{"$match": match}, {"$group": {"_id": None, "total": {"$sum": "$totalPrice"}}}]
    ).to_list(length=None)
    return round_money(rows[0]["total"]) if rows else 0.0


async def _users_by_id(user_ids: Iterable[str]) -> dict[str, dict[str, Any]]:
    """Map user id strings to user documents."""
    lookup: list[Any] = []
    for user_id in set(user_ids):
        oid = to_object_id(user_id)
        if oid is not None:
            lookup.append(oid)
        lookup.append(user_id)

    if not lookup:
        return {}
    docs = await mongodb.users.find({"_id": {"$in": lookup}}).to_list(length=None)
    return {str(doc["_id"]): doc for doc in docs}


class AdminService:
    """Derived admin views; nothing here is cached."""

    async def get_dashboard_stats(self) -> DashboardStats:
        now = naive_utc(utcnow())
        start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        window_start = month_start(now, settings.dashboard_revenue_months - 1)

        revenue_by_month_pipeline = [
            {"$match": {**PAID, "createdAt": {"$gte": window_start}}},
            {
                "$group": {
                    "_id": {"year": {"$year": "$createdAt"}, "month": {"$month": "$createdAt"}},
                    "revenue": {"$sum": "$totalPrice"},
                    "orderCount": {"$sum": 1},
                }
            },
            {"$sort": {"_id.year": 1, "_id.month": 1}},
        ]
        top_products_pipeline = [
            {"$match": PAID},
            {"$unwind": "$items"},
            {
                "$group": {
                    "_id": "$items.productId",
                    "title": {"$first": "$items.title"},
                    "thumbnail": {"$first": "$items.thumbnail"},
                    "totalSold": {"$sum": "$items.quantity"},
                    "totalRevenue": {"$sum": {"$multiply": ["$items.price", "$items.quantity"]}},
                }
            },
            {"$sort": {"totalSold": -1}},
            {"$limit": settings.dashboard_top_products},
        ]

        (
            total_users,
            total_orders,
            total_revenue,
            status_rows,
            recent_docs,
            month_rows,
            product_rows,
            new_users_today,
            orders_today,
            revenue_today,
        ) = await asyncio.gather(
            mongodb.users.count_documents({}),
            mongodb.orders.count_documents({}),
            _sum_total_price(PAID),
            mongodb.orders.aggregate(
                [{"$group": {"_id": "$orderStatus", "count": {"$sum": 1}}}]
            ).to_list(length=None),
            mongodb.orders.find().sort("createdAt", DESCENDING).limit(RECENT_ORDERS).to_list(length=None),
            mongodb.orders.aggregate(revenue_by_month_pipeline).to_list(length=None),
            mongodb.orders.aggregate(top_products_pipeline).to_list(length=None),
            mongodb.users.count_documents({"createdAt": {"$gte": start_of_today}}),
            mongodb.orders.count_documents({"createdAt": {"$gte": start_of_today}}),
            _sum_total_price({**PAID, "createdAt": {"$gte": start_of_today}}),
        )

        orders_by_status = {status: 0 for status in OrderStatus}
        known = {status.value: status for status in OrderStatus}
        for row in status_rows:
            status = known.get(row["_id"])
            if status is not None:
                orders_by_status[status] = row["count"]

        users = await _users_by_id(doc["userId"] for doc in recent_docs)
        recent_orders = [
            RecentOrderSummary(
                id=doc["_id"],
                userId=doc["userId"],
                userName=users.get(doc["userId"], {}).get("name"),
                userEmail=users.get(doc["userId"], {}).get("email"),
                totalPrice=doc["totalPrice"],
                orderStatus=doc["orderStatus"],
                createdAt=doc["createdAt"],
                itemCount=doc.get("totalItems", 0),
            )
            for doc in recent_docs
        ]

        return DashboardStats(
            totalUsers=total_users,
            totalOrders=total_orders,
            totalRevenue=total_revenue,
            pendingOrders=orders_by_status[OrderStatus.PENDING],
            processingOrders=orders_by_status[OrderStatus.PROCESSING],
            shippedOrders=orders_by_status[OrderStatus.SHIPPED],
            deliveredOrders=orders_by_status[OrderStatus.DELIVERED],
            cancelledOrders=orders_by_status[OrderStatus.CANCELLED],
            recentOrders=recent_orders,
            ordersByStatus=orders_by_status,
            revenueByMonth=[
                RevenueByMonth(
                    month=f"{row['_id']['year']}-{row['_id']['month']:02d}",
                    revenue=round_money(row["revenue"]),
                    orderCount=row["orderCount"],
                )
                for row in month_rows
            ],
            topProducts=[
                TopProduct(
                    productId=row["_id"],
                    title=row["title"],
                    thumbnail=row["thumbnail"],
                    totalSold=row["totalSold"],
                    totalRevenue=round_money(row["totalRevenue"]),
                )
                for row in product_rows
            ],
            newUsersToday=new_users_today,
            ordersToday=orders_today,
            revenueToday=revenue_today,
        )

    @staticmethod
    async def _order_query(filters: AdminOrderFilters) -> dict[str, Any]:
        query: dict[str, Any] = {}
        if filters.status:
            query["orderStatus"] = filters.status.value
        if filters.userId:
            query["userId"] = filters.userId

        created: dict[str, Any] = {}
        if filters.dateFrom:
            created["$gte"] = naive_utc(filters.dateFrom)
        if filters.dateTo:
            created["$lte"] = naive_utc(filters.dateTo)
        if created:
            query["createdAt"] = created

        if filters.search:
            if OBJECT_ID_PATTERN.match(filters.search):
                query["_id"] = to_object_id(filters.search)
            else:
                # Resolve name/email matches first so paging counts stay exact
                pattern = {"$regex": re.escape(filters.search), "$options": "i"}
                matches = await mongodb.users.find(
                    {"$or": [{"name": pattern}, {"email": pattern}]}, {"_id": 1}
                ).to_list(length=None)
                user_ids = [str(doc["_id"]) for doc in matches]
                if filters.userId:
                    user_ids = [uid for uid in user_ids if uid == filters.userId]
                query["userId"] = {"$in": user_ids}
        return query

    async def list_orders(self, filters: AdminOrderFilters) -> AdminOrderListResponse:
        """Paginated order list across all users, enriched with user name/email."""
        query = await self._order_query(filters)
        direction = ASCENDING if filters.order == "asc" else DESCENDING

        cursor = (
            mongodb.orders.find(query)
            .sort(filters.sortBy, direction)
            .skip((filters.page - 1) * filters.limit)
            .limit(filters.limit)
        )
        docs = await cursor.to_list(length=None)
        total = await mongodb.orders.count_documents(query)

        users = await _users_by_id(doc["userId"] for doc in docs)
        orders = [
            AdminOrderItem.model_validate(
                {
                    **doc,
                    "userName": users.get(doc["userId"], {}).get("name"),
                    "userEmail": users.get(doc["userId"], {}).get("email"),
                }
            )
            for doc in docs
        ]
        return AdminOrderListResponse(
            orders=orders,
            total=total,
            page=filters.page,
            pages=math.ceil(total / filters.limit),
        )

    @staticmethod
    async def get_order(order_id: str) -> AdminOrderItem:
        """Order detail for any user."""
        order = await order_service.get_order(order_id)
        user = (await _users_by_id([order.userId])).get(order.userId, {})
        return AdminOrderItem(
            **order.model_dump(),
            userName=user.get("name"),
            userEmail=user.get("email"),
        )


# Global admin service instance
admin_service = AdminService()
