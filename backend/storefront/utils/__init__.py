"""Utilities package."""

from storefront.utils.cache import TTLCache
from storefront.utils.helpers import (
    id_filter,
    month_start,
    naive_utc,
    round_money,
    to_minor_units,
    to_object_id,
    utcnow,
)
from storefront.utils.logger import setup_logging

__all__ = [
    "setup_logging",
    "TTLCache",
    "utcnow",
    "naive_utc",
    "to_object_id",
    "id_filter",
    "round_money",
    "to_minor_units",
    "month_start",
]
