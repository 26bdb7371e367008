"""Order service: checkout, order reads and status management."""

import logging
from typing import Any, Iterable, Optional

from pydantic import BaseModel
from pymongo.errors import DuplicateKeyError

from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.errors import (
    ConcurrentModificationError,
    EmptyCartError,
    NotFoundError,
    PaymentNotCompletedError,
    StorefrontError,
)
from storefront.models.cart import CartItem
from storefront.models.common import to_document
from storefront.models.order import (
    BulkActionResponse,
    CreatePaymentIntentResponse,
    OrderInDB,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    ShippingAddress,
    TrackingInfo,
)
from storefront.services.cart_service import cart_service
from storefront.services.order_lifecycle import apply_transition, initial_history, replace_tracking
from storefront.services.payment_service import StripeGateway, payment_gateway
from storefront.utils.helpers import round_money, to_minor_units, to_object_id, utcnow

logger = logging.getLogger(__name__)
settings = get_settings()

WEBHOOK_PAYMENT_STATUS = {
    "payment_intent.succeeded": PaymentStatus.PAID,
    "payment_intent.payment_failed": PaymentStatus.FAILED,
    "charge.refunded": PaymentStatus.REFUNDED,
}


class OrderTotals(BaseModel):
    """Monetary breakdown of a checkout."""

    totalItems: int
    subtotal: float
    tax: float
    shipping: float
    totalPrice: float


def calculate_totals(
    items: Iterable[CartItem | OrderItem],
    tax_rate: float,
    shipping: float,
) -> OrderTotals:
    """Compute subtotal, flat-rate tax, flat shipping and total, rounded to cents."""
    items = list(items)
    subtotal = round_money(sum(item.price * item.quantity for item in items))
    tax = round_money(subtotal * tax_rate)
    shipping = round_money(shipping)
    return OrderTotals(
        totalItems=sum(item.quantity for item in items),
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        totalPrice=round_money(subtotal + tax + shipping),
    )


class OrderService:
    """Checkout flow and order lifecycle persistence."""

    def __init__(self, gateway: Optional[StripeGateway] = None) -> None:
        self.gateway = gateway or payment_gateway

    @staticmethod
    def _totals(items: Iterable[CartItem | OrderItem]) -> OrderTotals:
        return calculate_totals(items, settings.tax_rate, settings.shipping_flat)

    # ── Checkout ───────────────────────────────────────────────────────────

    async def create_payment_intent(
        self, user_id: str, shipping_address: ShippingAddress
    ) -> CreatePaymentIntentResponse:
        """Price the user's cart and open a payment intent for its total."""
        cart = await cart_service.get_cart(user_id)
        if not cart.items:
            raise EmptyCartError()

        totals = self._totals(cart.items)
        intent = await self.gateway.create_intent(
            amount=to_minor_units(totals.totalPrice),
            currency=settings.payment_currency,
            metadata={
                "userId": user_id,
                "cartId": str(cart.id),
                "subtotal": str(totals.subtotal),
                "tax": str(totals.tax),
                "shipping": str(totals.shipping),
                "shipToCountry": shipping_address.country,
            },
        )
        return CreatePaymentIntentResponse(clientSecret=intent.clientSecret or "", paymentIntentId=intent.id)

    async def confirm_order(
        self, user_id: str, payment_intent_id: str, shipping_address: ShippingAddress
    ) -> OrderInDB:
        """Materialize an order from the cart once its payment has succeeded.

        Confirming an intent that already produced an order returns that order.
        Only the user the intent was opened for may confirm it, and the amount
        captured must equal the cart total being turned into the order.
        """
        intent = await self.gateway.retrieve_intent(payment_intent_id)
        if intent.metadata.get("userId") != user_id:
            logger.warning(
                "User %s tried to confirm payment intent %s opened for another user", user_id, payment_intent_id
            )
            raise NotFoundError("Order for payment intent", payment_intent_id)
        if not intent.succeeded:
            raise PaymentNotCompletedError(payment_intent_id, intent.status)

        existing = await self._find_by_payment_intent(payment_intent_id, user_id)
        if existing:
            logger.info("Order %s already exists for payment intent %s", existing.id, payment_intent_id)
            return existing

        cart = await cart_service.get_cart(user_id)
        if not cart.items:
            raise EmptyCartError()

        totals = self._totals(cart.items)
        expected = to_minor_units(totals.totalPrice)
        if intent.amount != expected:
            logger.warning(
                "Payment intent %s captured %d but cart total is %d", payment_intent_id, intent.amount, expected
            )
            raise PaymentNotCompletedError(
                payment_intent_id,
                intent.status,
                reason=f"paid {intent.amount} does not match order total {expected}",
            )

        now = utcnow()
        order = OrderInDB(
            userId=user_id,
            items=[
                OrderItem(
                    productId=item.productId,
                    quantity=item.quantity,
                    price=item.price,
                    title=item.title,
                    thumbnail=item.thumbnail,
                )
                for item in cart.items
            ],
            **totals.model_dump(),
            shippingAddress=shipping_address,
            paymentIntentId=payment_intent_id,
            paymentStatus=PaymentStatus.PAID,
            orderStatus=OrderStatus.PROCESSING,
            statusHistory=initial_history(now),
            createdAt=now,
            updatedAt=now,
        )

        try:
            result = await mongodb.orders.insert_one(to_document(order))
        except DuplicateKeyError:
            # A concurrent confirmation won the insert
            existing = await self._find_by_payment_intent(payment_intent_id, user_id)
            if existing:
                return existing
            raise

        order.id = str(result.inserted_id)

        await mongodb.carts.update_one(
            {"userId": user_id},
            {"$set": {"items": [], "totalItems": 0, "totalPrice": 0.0, "updatedAt": now}},
        )
        logger.info(
            "Order %s created for user %s (payment intent %s, total %.2f)",
            order.id,
            user_id,
            payment_intent_id,
            order.totalPrice,
        )
        return order

    @staticmethod
    async def _find_by_payment_intent(payment_intent_id: str, user_id: str) -> Optional[OrderInDB]:
        doc = await mongodb.orders.find_one({"paymentIntentId": payment_intent_id})
        if not doc:
            return None
        order = OrderInDB.model_validate(doc)
        if order.userId != user_id:
            raise NotFoundError("Order for payment intent", payment_intent_id)
        return order

    # ── Reads ──────────────────────────────────────────────────────────────

    @staticmethod
    async def get_user_orders(user_id: str) -> list[OrderInDB]:
        """All orders of a user, newest first."""
        cursor = mongodb.orders.find({"userId": user_id}).sort("createdAt", -1)
        docs = await cursor.to_list(length=None)
        return [OrderInDB.model_validate(doc) for doc in docs]

    @staticmethod
    async def get_order(order_id: str, user_id: Optional[str] = None) -> OrderInDB:
        """Get an order by ID, scoped to ``user_id`` when given."""
        oid = to_object_id(order_id)
        if oid is None:
            raise NotFoundError("Order", order_id)

        query: dict[str, Any] = {"_id": oid}
        if user_id is not None:
            query["userId"] = user_id

        doc = await mongodb.orders.find_one(query)
        if not doc:
            raise NotFoundError("Order", order_id)
        return OrderInDB.model_validate(doc)

    # ── Status management ──────────────────────────────────────────────────

    @staticmethod
    async def _commit(before: OrderInDB, after: OrderInDB, push_history: bool) -> OrderInDB:
        """Write ``after`` only if the stored order still matches ``before``."""
        expected_version: Any = before.version if before.version else {"$in": [0, None]}
        update: dict[str, Any] = {
            "$set": {"orderStatus": after.orderStatus.value, "updatedAt": after.updatedAt},
            "$inc": {"version": 1},
        }
        if after.trackingInfo is not None:
            update["$set"]["trackingInfo"] = to_document(after.trackingInfo)
        if push_history:
            update["$push"] = {"statusHistory": to_document(after.statusHistory[-1])}

        result = await mongodb.orders.update_one(
            {
                "_id": to_object_id(before.id),
                "orderStatus": before.orderStatus.value,
                "version": expected_version,
            },
            update,
        )
        if result.matched_count == 0:
            raise ConcurrentModificationError("Order", str(before.id))

        return after.model_copy(update={"version": before.version + 1})

    async def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        note: Optional[str] = None,
        tracking: Optional[TrackingInfo] = None,
    ) -> OrderInDB:
        """Transition one order, appending a history entry."""
        order = await self.get_order(order_id)
        updated = apply_transition(order, status, note=note, tracking=tracking)
        updated = await self._commit(order, updated, push_history=True)
        logger.info("Order %s status %s -> %s", order_id, order.orderStatus.value, status.value)
        return updated

    async def update_tracking(self, order_id: str, tracking: TrackingInfo) -> OrderInDB:
        """Replace tracking info on a shipped order."""
        order = await self.get_order(order_id)
        updated = replace_tracking(order, tracking)
        updated = await self._commit(order, updated, push_history=False)
        logger.info("Order %s tracking updated", order_id)
        return updated

    async def bulk_update_status(
        self, order_ids: list[str], status: OrderStatus, note: Optional[str] = None
    ) -> BulkActionResponse:
        """Transition each order independently; failures don't affect the others."""
        updated = 0
        errors: list[str] = []

        for order_id in order_ids:
            try:
                await self.update_status(order_id, status, note=note or f"Bulk update: Order {status.value}")
                updated += 1
            except NotFoundError:
                errors.append(f"Order {order_id} not found")
            except StorefrontError as e:
                errors.append(f"Order {order_id}: {e}")

        failed = len(errors)
        logger.info("Bulk status update to %s: %d updated, %d failed", status.value, updated, failed)
        return BulkActionResponse(success=failed == 0, updated=updated, failed=failed, errors=errors)

    # ── Payment reconciliation ─────────────────────────────────────────────

    @staticmethod
    async def handle_webhook(event: dict[str, Any]) -> None:
        """Mirror provider payment events onto the matching order."""
        event_type = event.get("type", "")
        payload = (event.get("data") or {}).get("object") or {}

        payment_status = WEBHOOK_PAYMENT_STATUS.get(event_type)
        if payment_status is None:
            logger.info("Unhandled webhook event type: %s", event_type)
            return

        if event_type.startswith("charge."):
            payment_intent_id = payload.get("payment_intent")
        else:
            payment_intent_id = payload.get("id")

        if not payment_intent_id:
            logger.warning("Webhook %s carries no payment intent id", event_type)
            return

        result = await mongodb.orders.update_one(
            {"paymentIntentId": payment_intent_id},
            {"$set": {"paymentStatus": payment_status.value, "updatedAt": utcnow()}},
        )
        logger.info(
            "Webhook %s: payment intent %s -> %s (orders matched: %d)",
            event_type,
            payment_intent_id,
            payment_status.value,
            result.matched_count,
        )


# Global order service instance
order_service = OrderService()
