"""User data models.

Users and sessions are written by the external auth provider; these models
only describe what this service reads and the few fields it may update.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from storefront.models.common import MongoModel, ObjectIdStr
from storefront.models.order import OrderStatus


class UserRole(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


class CurrentUser(BaseModel):
    """Identity attached to an authenticated request."""

    id: str
    email: EmailStr
    name: str
    role: UserRole = UserRole.CUSTOMER


class UserInDB(MongoModel):
    """User model as stored in database."""

    name: str = Field(..., max_length=100)
    email: EmailStr
    emailVerified: bool = False
    image: Optional[str] = None
    firstName: Optional[str] = Field(None, max_length=50)
    lastName: Optional[str] = Field(None, max_length=50)
    role: UserRole = UserRole.CUSTOMER
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "_id": "665f1b9a8b3e4a1f2c9d0e01",
                "name": "John Doe",
                "email": "john.doe@example.com",
                "emailVerified": True,
                "firstName": "John",
                "lastName": "Doe",
                "role": "customer",
                "createdAt": "2024-01-01T00:00:00",
                "updatedAt": "2024-01-01T00:00:00",
            }
        },
    }

    def to_current_user(self) -> CurrentUser:
        return CurrentUser(id=self.id, email=self.email, name=self.name, role=self.role)


class UserUpdate(BaseModel):
    """Profile update model."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    firstName: Optional[str] = Field(None, min_length=1, max_length=50)
    lastName: Optional[str] = Field(None, min_length=1, max_length=50)


class UpdateUserRoleRequest(BaseModel):
    role: UserRole


class UserListItem(UserInDB):
    """User row in the admin list, with paid-order statistics."""

    orderCount: int = 0
    totalSpent: float = 0.0


class UserListResponse(BaseModel):
    users: list[UserListItem]
    total: int
    page: int
    pages: int


class UserOrderSummary(BaseModel):
    id: ObjectIdStr = Field(..., alias="_id")
    totalPrice: float
    orderStatus: OrderStatus
    createdAt: datetime

    model_config = {"populate_by_name": True}


class UserDetailResponse(UserListItem):
    orders: list[UserOrderSummary] = Field(default_factory=list)
