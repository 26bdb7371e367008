"""Utility helper functions."""

from datetime import UTC, datetime
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId


def utcnow() -> datetime:
    """Get the current timezone-aware UTC time."""
    return datetime.now(UTC)


def naive_utc(value: datetime) -> datetime:
    """Convert a datetime to naive UTC, the form MongoDB stores and returns."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse a string into an ObjectId, or None when malformed."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def id_filter(value: str) -> dict:
    """Build an ``_id`` filter that matches ObjectId or plain string ids."""
    oid = to_object_id(value)
    if oid is not None:
        return {"_id": {"$in": [oid, value]}}
    return {"_id": value}


def round_money(amount: float) -> float:
    """Round a monetary amount to cents."""
    return round(amount, 2)


def to_minor_units(amount: float) -> int:
    """Convert a major-unit amount (e.g. dollars) to minor units (cents)."""
    return int(round(amount * 100))


def month_start(value: datetime, months_back: int = 0) -> datetime:
    """First instant of the month ``months_back`` months before ``value``'s month."""
    month_index = value.year * 12 + (value.month - 1) - months_back
    year, month = divmod(month_index, 12)
    return value.replace(year=year, month=month + 1, day=1, hour=0, minute=0, second=0, microsecond=0)
