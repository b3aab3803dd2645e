"""Utilities package"""

from .validators import validate_phone, validate_email_address, validate_price
from .helpers import relative_time, format_currency, rating_label

__all__ = [
    "validate_phone",
    "validate_email_address",
    "validate_price",
    "relative_time",
    "format_currency",
    "rating_label"
]
