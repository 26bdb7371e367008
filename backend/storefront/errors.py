"""Custom exceptions for the storefront API."""


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    pass


class UnauthorizedError(StorefrontError):
    """Raised when a request carries no valid session."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ForbiddenError(StorefrontError):
    """Raised when an authenticated user lacks the required role."""

    def __init__(self, message: str = "Admin access required"):
        super().__init__(message)


class NotFoundError(StorefrontError):
    """Raised when an entity doesn't exist."""

    def __init__(self, entity: str, entity_id: str | int | None = None):
        self.entity = entity
        self.entity_id = entity_id
        msg = f"{entity} not found"
        if entity_id is not None:
            msg = f"{entity} not found: {entity_id}"
        super().__init__(msg)


class ValidationError(StorefrontError):
    """Raised when input is malformed or violates a business precondition."""

    pass


class InvalidTransitionError(StorefrontError):
    """Raised when an order status change is not permitted."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Invalid status transition from {current} to {requested}")


class EmptyCartError(StorefrontError):
    """Raised when checking out a cart with no items."""

    def __init__(self):
        super().__init__("Cart is empty")


class PaymentNotCompletedError(StorefrontError):
    """Raised when a payment intent has not succeeded."""

    def __init__(self, payment_intent_id: str, status: str | None = None, reason: str | None = None):
        self.payment_intent_id = payment_intent_id
        self.status = status
        msg = "Payment not completed"
        if reason:
            msg = f"Payment not completed ({reason})"
        elif status:
            msg = f"Payment not completed (status: {status})"
        super().__init__(msg)


class ConcurrentModificationError(StorefrontError):
    """Raised when a document changed between read and conditional write."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} was modified concurrently, retry the request")


class UpstreamError(StorefrontError):
    """Raised when the product catalog or payment provider fails."""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider} error: {reason}")
