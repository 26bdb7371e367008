"""User service for profile and account management."""

import logging
import math
import re
from typing import Any

from pymongo import ASCENDING, DESCENDING, ReturnDocument

from storefront.database.mongodb import mongodb
from storefront.errors import NotFoundError, ValidationError
from storefront.models.admin import UserFilters
from storefront.models.order import PaymentStatus
from storefront.models.user import (
    UserDetailResponse,
    UserInDB,
    UserListItem,
    UserListResponse,
    UserOrderSummary,
    UserRole,
    UserUpdate,
)
from storefront.utils.helpers import id_filter, utcnow

logger = logging.getLogger(__name__)

RECENT_USER_ORDERS = 20


class UserService:
    """User service for handling user-related operations."""

    @staticmethod
    async def get_user(user_id: str) -> UserInDB:
        """Get user by ID."""
        doc = await mongodb.users.find_one(id_filter(user_id))
        if not doc:
            raise NotFoundError("User", user_id)
        return UserInDB.model_validate(doc)

    @staticmethod
    async def update_profile(user_id: str, update: UserUpdate) -> UserInDB:
        """Update the caller's own name fields."""
        changes = update.model_dump(exclude_none=True)
        if not changes:
            return await UserService.get_user(user_id)

        changes["updatedAt"] = utcnow()
        doc = await mongodb.users.find_one_and_update(
            id_filter(user_id),
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            raise NotFoundError("User", user_id)
        return UserInDB.model_validate(doc)

    @staticmethod
    async def _paid_order_stats(user_ids: list[str]) -> dict[str, dict[str, Any]]:
        pipeline = [
            {"$match": {"userId": {"$in": user_ids}, "paymentStatus": PaymentStatus.PAID.value}},
            {
                "$group": {
                    "_id": "$userId",
                    "orderCount": {"$sum": 1},
                    "totalSpent": {"$sum": "$totalPrice"},
                }
            },
        ]
        rows = await mongodb.orders.aggregate(pipeline).to_list(length=None)
        return {row["_id"]: row for row in rows}

    async def list_users(self, filters: UserFilters) -> UserListResponse:
        """Paginated user list with paid-order statistics."""
        query: dict[str, Any] = {}
        if filters.search:
            pattern = {"$regex": re.escape(filters.search), "$options": "i"}
            query["$or"] = [{"name": pattern}, {"email": pattern}]
        if filters.role:
            query["role"] = filters.role.value

        direction = ASCENDING if filters.order == "asc" else DESCENDING
        cursor = (
            mongodb.users.find(query)
            .sort(filters.sortBy, direction)
            .skip((filters.page - 1) * filters.limit)
            .limit(filters.limit)
        )
        docs = await cursor.to_list(length=None)
        total = await mongodb.users.count_documents(query)

        stats = await self._paid_order_stats([str(doc["_id"]) for doc in docs])
        users = []
        for doc in docs:
            row = stats.get(str(doc["_id"]), {})
            users.append(
                UserListItem.model_validate(
                    {**doc, "orderCount": row.get("orderCount", 0), "totalSpent": row.get("totalSpent", 0.0)}
                )
            )

        return UserListResponse(
            users=users,
            total=total,
            page=filters.page,
            pages=math.ceil(total / filters.limit),
        )

    async def get_user_detail(self, user_id: str) -> UserDetailResponse:
        """User with paid-order statistics and their most recent orders."""
        user = await self.get_user(user_id)

        cursor = (
            mongodb.orders.find(
                {"userId": user.id},
                {"_id": 1, "totalPrice": 1, "orderStatus": 1, "createdAt": 1},
            )
            .sort("createdAt", DESCENDING)
            .limit(RECENT_USER_ORDERS)
        )
        orders = await cursor.to_list(length=None)
        row = (await self._paid_order_stats([user.id])).get(user.id, {})

        return UserDetailResponse(
            **user.model_dump(),
            orderCount=row.get("orderCount", 0),
            totalSpent=row.get("totalSpent", 0.0),
            orders=[UserOrderSummary.model_validate(order) for order in orders],
        )

    @staticmethod
    async def set_role(user_id: str, role: UserRole) -> UserInDB:
        doc = await mongodb.users.find_one_and_update(
            id_filter(user_id),
            {"$set": {"role": role.value, "updatedAt": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            raise NotFoundError("User", user_id)
        logger.info("User %s role set to %s", user_id, role.value)
        return UserInDB.model_validate(doc)

    async def update_role(self, acting_user_id: str, user_id: str, role: UserRole) -> UserInDB:
        """Change another user's role."""
        if acting_user_id == user_id:
            raise ValidationError("Cannot change your own role")
        return await self.set_role(user_id, role)

    async def set_role_by_email(self, email: str, role: UserRole) -> UserInDB:
        doc = await mongodb.users.find_one({"email": email})
        if not doc:
            raise NotFoundError("User", email)
        return await self.set_role(str(doc["_id"]), role)

    @staticmethod
    async def delete_user(acting_user_id: str, user_id: str) -> None:
        """Delete a user without order history."""
        if acting_user_id == user_id:
            raise ValidationError("Cannot delete your own account")

        if await mongodb.orders.count_documents({"userId": user_id}) > 0:
            raise ValidationError("Cannot delete user with existing orders")

        result = await mongodb.users.delete_one(id_filter(user_id))
        if result.deleted_count == 0:
            raise NotFoundError("User", user_id)
        logger.info("User %s deleted by %s", user_id, acting_user_id)


# Global user service instance
user_service = UserService()
