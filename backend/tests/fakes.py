"""Test doubles: an awaitable view over mongomock and a scripted payment gateway."""

from typing import Any, Optional

from storefront.errors import ValidationError
from storefront.services.payment_service import PaymentIntent, StripeGateway


class AsyncCursor:
    """Chainable cursor with motor's ``to_list`` over a mongomock cursor."""

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor

    def sort(self, *args: Any, **kwargs: Any) -> "AsyncCursor":
        self._cursor = self._cursor.sort(*args, **kwargs)
        return self

    def skip(self, count: int) -> "AsyncCursor":
        self._cursor = self._cursor.skip(count)
        return self

    def limit(self, count: int) -> "AsyncCursor":
        self._cursor = self._cursor.limit(count)
        return self

    async def to_list(self, length: Optional[int] = None) -> list[dict[str, Any]]:
        docs = list(self._cursor)
        return docs if length is None else docs[:length]


class AsyncCollection:
    """Motor-style collection: coroutine methods, cursors for find/aggregate."""

    def __init__(self, collection: Any) -> None:
        self._collection = collection

    def find(self, *args: Any, **kwargs: Any) -> AsyncCursor:
        return AsyncCursor(self._collection.find(*args, **kwargs))

    def aggregate(self, pipeline: list[dict[str, Any]], **kwargs: Any) -> AsyncCursor:
        return AsyncCursor(self._collection.aggregate(pipeline, **kwargs))

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._collection, name)
        if not callable(attr):
            return attr

        async def call(*args: Any, **kwargs: Any) -> Any:
            return attr(*args, **kwargs)

        return call


class AsyncDatabase:
    def __init__(self, database: Any) -> None:
        self._database = database

    def __getitem__(self, name: str) -> AsyncCollection:
        return AsyncCollection(self._database[name])

    @property
    def sync(self) -> Any:
        """The underlying mongomock database, for direct assertions."""
        return self._database


class FakeGateway(StripeGateway):
    """Payment gateway that records calls and never leaves the process.

    Webhook parsing is inherited, so unsigned payloads are accepted.
    """

    def __init__(self) -> None:
        super().__init__(api_key="sk_test_fake", webhook_secret="")
        self.intents: dict[str, PaymentIntent] = {}
        self.create_calls: list[dict[str, Any]] = []

    async def create_intent(self, amount: int, currency: str, metadata: dict[str, str]) -> PaymentIntent:
        self.create_calls.append({"amount": amount, "currency": currency, "metadata": metadata})
        intent = PaymentIntent(
            id=f"pi_test_{len(self.create_calls)}",
            status="requires_payment_method",
            amount=amount,
            currency=currency,
            clientSecret=f"pi_test_{len(self.create_calls)}_secret",
            metadata=metadata,
        )
        self.intents[intent.id] = intent
        return intent

    async def retrieve_intent(self, payment_intent_id: str) -> PaymentIntent:
        if payment_intent_id not in self.intents:
            raise ValidationError(f"Unknown payment intent: {payment_intent_id}")
        return self.intents[payment_intent_id]

    def succeed(self, payment_intent_id: str, amount: int = 0, user_id: Optional[str] = None) -> PaymentIntent:
        """Mark an intent as paid, creating it for ``user_id`` if the test never asked for one."""
        intent = self.intents.get(payment_intent_id) or PaymentIntent(
            id=payment_intent_id,
            status="succeeded",
            amount=amount,
            currency="usd",
            metadata={"userId": user_id} if user_id else {},
        )
        intent = intent.model_copy(update={"status": "succeeded"})
        self.intents[payment_intent_id] = intent
        return intent
