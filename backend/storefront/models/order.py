"""Order, payment and status-tracking data models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from storefront.models.common import MongoModel, ObjectIdStr
from storefront.utils.helpers import utcnow


class OrderStatus(str, Enum):
    """Fulfillment stage of an order."""

    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """State of funds capture, mirrored from the payment provider."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class OrderItem(BaseModel):
    """Line item snapshot taken at purchase time."""

    productId: int = Field(..., description="Catalog product ID")
    quantity: int = Field(..., ge=1, description="Quantity ordered")
    price: float = Field(..., ge=0, description="Unit price at purchase time")
    title: str = Field(..., description="Product title")
    thumbnail: str = Field(..., description="Product thumbnail URL")


class ShippingAddress(BaseModel):
    """Destination snapshot."""

    fullName: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    postalCode: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)


class StatusHistoryEntry(BaseModel):
    """One entry of the append-only status audit trail."""

    status: OrderStatus
    timestamp: datetime = Field(default_factory=utcnow)
    note: Optional[str] = None


class TrackingInfo(BaseModel):
    """Carrier metadata attached once an order ships."""

    carrier: Optional[str] = Field(None, max_length=100)
    trackingNumber: Optional[str] = Field(None, max_length=100)
    estimatedDelivery: Optional[datetime] = None
    trackingUrl: Optional[str] = None


class OrderInDB(MongoModel):
    """Order model as stored in database."""

    userId: ObjectIdStr = Field(..., description="User who placed the order")
    items: list[OrderItem] = Field(..., min_length=1, description="Items in the order")
    totalItems: int = Field(..., ge=1)
    subtotal: float = Field(..., ge=0)
    tax: float = Field(0, ge=0)
    shipping: float = Field(0, ge=0)
    totalPrice: float = Field(..., ge=0, description="Total order price")
    shippingAddress: ShippingAddress
    paymentIntentId: str = Field(..., description="Payment provider reference")
    paymentStatus: PaymentStatus = PaymentStatus.PENDING
    orderStatus: OrderStatus = OrderStatus.PENDING
    statusHistory: list[StatusHistoryEntry] = Field(default_factory=list)
    trackingInfo: Optional[TrackingInfo] = None
    version: int = Field(0, ge=0, description="Optimistic concurrency counter")
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "_id": "665f1c2e8b3e4a1f2c9d0e11",
                "userId": "665f1b9a8b3e4a1f2c9d0e01",
                "items": [
                    {
                        "productId": 1,
                        "quantity": 2,
                        "price": 10.0,
                        "title": "Essence Mascara Lash Princess",
                        "thumbnail": "https://cdn.dummyjson.com/products/images/beauty/1/thumbnail.png",
                    }
                ],
                "totalItems": 2,
                "subtotal": 20.0,
                "tax": 2.0,
                "shipping": 0.0,
                "totalPrice": 22.0,
                "paymentIntentId": "pi_3PLx",
                "paymentStatus": "paid",
                "orderStatus": "processing",
                "statusHistory": [
                    {"status": "pending", "timestamp": "2024-06-01T10:00:00Z", "note": "Order placed"},
                    {"status": "processing", "timestamp": "2024-06-01T10:00:00Z", "note": "Payment confirmed"},
                ],
                "trackingInfo": None,
                "version": 0,
            }
        },
    }


class CreatePaymentIntentRequest(BaseModel):
    """Checkout step one."""

    shippingAddress: ShippingAddress


class CreatePaymentIntentResponse(BaseModel):
    clientSecret: str
    paymentIntentId: str


class ConfirmOrderRequest(BaseModel):
    """Checkout step two, after the client completed payment."""

    paymentIntentId: str = Field(..., min_length=1)
    shippingAddress: ShippingAddress


class UpdateOrderStatusRequest(BaseModel):
    """Single-order status transition."""

    status: OrderStatus
    note: Optional[str] = Field(None, max_length=500)
    trackingInfo: Optional[TrackingInfo] = None


class UpdateTrackingRequest(BaseModel):
    trackingInfo: TrackingInfo


class BulkUpdateStatusRequest(BaseModel):
    """Apply one target status to many orders."""

    orderIds: list[str] = Field(..., min_length=1)
    status: OrderStatus
    note: Optional[str] = Field(None, max_length=500)


class BulkActionResponse(BaseModel):
    """Per-batch outcome; failures never roll back successful updates."""

    success: bool
    updated: int
    failed: int
    errors: list[str] = Field(default_factory=list)


class WebhookAck(BaseModel):
    received: bool = True
