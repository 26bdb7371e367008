"""Checkout and order routes."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, Request, status

from storefront.api.dependencies import CurrentUserDep, require_role
from storefront.models.order import (
    BulkActionResponse,
    BulkUpdateStatusRequest,
    ConfirmOrderRequest,
    CreatePaymentIntentRequest,
    CreatePaymentIntentResponse,
    OrderInDB,
    UpdateOrderStatusRequest,
    WebhookAck,
)
from storefront.models.user import UserRole
from storefront.services.order_service import order_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/create-payment-intent", response_model=CreatePaymentIntentResponse)
async def create_payment_intent(
    body: CreatePaymentIntentRequest, user: CurrentUserDep
) -> CreatePaymentIntentResponse:
    """Price the cart and open a payment intent for it."""
    return await order_service.create_payment_intent(user.id, body.shippingAddress)


@router.post("/confirm", response_model=OrderInDB, status_code=status.HTTP_201_CREATED)
async def confirm_order(body: ConfirmOrderRequest, user: CurrentUserDep) -> OrderInDB:
    """Create the order for a succeeded payment; repeat calls return the same order."""
    return await order_service.confirm_order(user.id, body.paymentIntentId, body.shippingAddress)


@router.post("/webhook", response_model=WebhookAck)
async def payment_webhook(
    request: Request,
    stripe_signature: Annotated[Optional[str], Header(alias="Stripe-Signature")] = None,
) -> WebhookAck:
    """Payment provider events; authenticated by signature, not session."""
    payload = await request.body()
    event = order_service.gateway.parse_event(payload, stripe_signature)
    await order_service.handle_webhook(event)
    return WebhookAck()


@router.post(
    "/bulk-update",
    response_model=BulkActionResponse,
    dependencies=[Depends(require_role(UserRole.ADMIN))],
)
async def bulk_update_status(body: BulkUpdateStatusRequest) -> BulkActionResponse:
    return await order_service.bulk_update_status(body.orderIds, body.status, body.note)


@router.get("", response_model=list[OrderInDB])
async def list_orders(user: CurrentUserDep) -> list[OrderInDB]:
    """The caller's orders, newest first."""
    return await order_service.get_user_orders(user.id)


@router.get("/{order_id}", response_model=OrderInDB)
async def get_order(order_id: str, user: CurrentUserDep) -> OrderInDB:
    return await order_service.get_order(order_id, user_id=user.id)


@router.patch(
    "/{order_id}/status",
    response_model=OrderInDB,
    dependencies=[Depends(require_role(UserRole.ADMIN))],
)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderInDB:
    return await order_service.update_status(order_id, body.status, body.note, body.trackingInfo)
