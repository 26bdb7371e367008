"""Order status state machine.

``apply_transition`` is the only code path that changes an order's
``orderStatus``. It validates against ``ALLOWED_TRANSITIONS`` and returns a
new order with one history entry appended; the input order is never mutated,
so a rejected transition leaves it exactly as it was.
"""

import logging
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional

from storefront.errors import InvalidTransitionError, ValidationError
from storefront.models.order import OrderInDB, OrderStatus, StatusHistoryEntry, TrackingInfo
from storefront.utils.helpers import utcnow

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Mapping[OrderStatus, frozenset[OrderStatus]] = MappingProxyType(
    {
        OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
        OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
        OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
        OrderStatus.DELIVERED: frozenset(),
        OrderStatus.CANCELLED: frozenset(),
    }
)

TERMINAL_STATUSES = frozenset(status for status, targets in ALLOWED_TRANSITIONS.items() if not targets)

CREATION_HISTORY = (
    (OrderStatus.PENDING, "Order placed"),
    (OrderStatus.PROCESSING, "Payment confirmed"),
)


def _validate_transition_table(table: Mapping[OrderStatus, frozenset[OrderStatus]]) -> None:
    missing = set(OrderStatus) - set(table)
    if missing:
        raise RuntimeError(f"Transition table has no entry for: {sorted(s.value for s in missing)}")
    for source, targets in table.items():
        if source in targets:
            raise RuntimeError(f"Transition table has a self-loop on {source.value}")
        unknown = {t for t in targets if not isinstance(t, OrderStatus)}
        if unknown:
            raise RuntimeError(f"Transition table has unknown targets from {source.value}: {unknown}")
    if {OrderStatus.DELIVERED, OrderStatus.CANCELLED} - TERMINAL_STATUSES:
        raise RuntimeError("delivered and cancelled must be terminal")


_validate_transition_table(ALLOWED_TRANSITIONS)


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Check whether ``current`` may move to ``target``."""
    return target in ALLOWED_TRANSITIONS[current]


def default_note(status: OrderStatus) -> str:
    return f"Order {status.value}"


def initial_history(now: Optional[datetime] = None) -> list[StatusHistoryEntry]:
    """History written when an order is created from a confirmed payment."""
    now = now or utcnow()
    return [StatusHistoryEntry(status=status, timestamp=now, note=note) for status, note in CREATION_HISTORY]


def apply_transition(
    order: OrderInDB,
    target: OrderStatus,
    note: Optional[str] = None,
    tracking: Optional[TrackingInfo] = None,
    now: Optional[datetime] = None,
) -> OrderInDB:
    """Return a copy of ``order`` moved to ``target``.

    Raises:
        InvalidTransitionError: ``target`` is not reachable from the current status.
        ValidationError: tracking info was supplied for a status other than shipped.
    """
    current = order.orderStatus
    if not can_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)

    if tracking is not None and target is not OrderStatus.SHIPPED:
        raise ValidationError("Tracking info can only be attached when an order is shipped")

    now = now or utcnow()
    entry = StatusHistoryEntry(status=target, timestamp=now, note=note or default_note(target))
    update = {
        "orderStatus": target,
        "statusHistory": [*order.statusHistory, entry],
        "updatedAt": now,
    }
    if tracking is not None:
        update["trackingInfo"] = tracking

    logger.debug("Order %s: %s -> %s", order.id, current.value, target.value)
    return order.model_copy(update=update)


def replace_tracking(order: OrderInDB, tracking: TrackingInfo, now: Optional[datetime] = None) -> OrderInDB:
    """Return a copy of a shipped order with new tracking info."""
    if order.orderStatus is not OrderStatus.SHIPPED:
        raise ValidationError(
            f"Tracking info can only be updated while an order is shipped (current: {order.orderStatus.value})"
        )
    return order.model_copy(update={"trackingInfo": tracking, "updatedAt": now or utcnow()})
