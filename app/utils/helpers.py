"""
Helper utilities
"""

import os
import uuid
from typing import Iterable, Optional, Union
from decimal import Decimal
from datetime import datetime, timezone
from urllib.parse import urlparse, unquote

from app.core.config import settings
from app.schemas.product import ListingStats, Product
from app.utils.validators import clean_phone, is_valid_phone

def _as_aware(value: Union[datetime, str]) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value

def _now(now: Optional[datetime]) -> datetime:
    return _as_aware(now) if now else datetime.now(timezone.utc)

def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"

def format_long_date(value: datetime) -> str:
    """en-IN long date, e.g. 5 March 2026"""
    return f"{value.day} {value.strftime('%B')} {value.year}"

def format_short_date(value: Optional[Union[datetime, str]]) -> Optional[str]:
    """en-IN numeric date, e.g. 5/3/2026"""
    if not value:
        return None
    value = _as_aware(value)
    return f"{value.day}/{value.month}/{value.year}"

def relative_time(
    created_at: Optional[Union[datetime, str]],
    now: Optional[datetime] = None
) -> str:
    """
    Human readable age of a timestamp

    Args:
        created_at: When the record was created
        now: Reference time (defaults to current UTC time)

    Returns:
        "Just now", "N minutes ago", "N hours ago", "N days ago" or a date
    """
    if not created_at:
        return "Recently"

    created = _as_aware(created_at)
    seconds = max(0, int((_now(now) - created).total_seconds()))
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if minutes < 1:
        return "Just now"
    if hours < 1:
        return f"{_plural(minutes, 'minute')} ago"
    if days < 1:
        return f"{_plural(hours, 'hour')} ago"
    if days < 30:
        return f"{_plural(days, 'day')} ago"
    return format_long_date(created)

def joined_label(
    created_at: Optional[Union[datetime, str]],
    now: Optional[datetime] = None
) -> str:
    """Day-granularity age used on the profile screen"""
    if not created_at:
        return "Recently"

    created = _as_aware(created_at)
    days = max(0, int((_now(now) - created).total_seconds() // 86400))

    if days == 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 30:
        return f"{days} days ago"
    return format_short_date(created)

def format_currency(amount: Union[Decimal, float, int], currency: str = "INR") -> str:
    """
    Format amount as currency

    Args:
        amount: Amount to format
        currency: Currency code

    Returns:
        Formatted currency string
    """
    amount_str = f"{Decimal(str(amount)):.2f}"

    if currency == "INR":
        integer_part, decimal_part = amount_str.split('.')
        sign = ""
        if integer_part.startswith("-"):
            sign, integer_part = "-", integer_part[1:]

        # Indian grouping: last 3 digits, then groups of 2
        if len(integer_part) > 3:
            result = integer_part[-3:]
            integer_part = integer_part[:-3]
            while integer_part:
                result = integer_part[-2:] + "," + result
                integer_part = integer_part[:-2]
            return f"{sign}₹{result}.{decimal_part}"
        return f"{sign}₹{integer_part}.{decimal_part}"

    return f"{currency} {amount_str}"

def rating_label(average_rating: float, review_count: int) -> str:
    """Star summary shown on cards"""
    if not average_rating or average_rating <= 0:
        return "No ratings yet"
    noun = "review" if review_count == 1 else "reviews"
    return f"⭐ {average_rating:.1f} ({review_count} {noun})"

def image_or_placeholder(image_url: Optional[str]) -> str:
    """Missing images fall back to the placeholder"""
    return image_url or settings.PLACEHOLDER_IMAGE_URL

def call_url(phone: Optional[str]) -> Optional[str]:
    """tel: link for a real phone number"""
    digits = clean_phone(phone or "")
    if not is_valid_phone(digits):
        return None
    return f"tel:{digits}"

def whatsapp_url(phone: Optional[str]) -> Optional[str]:
    """WhatsApp chat link for a real phone number"""
    digits = clean_phone(phone or "")
    if not is_valid_phone(digits):
        return None
    return f"https://wa.me/{settings.PHONE_COUNTRY_CODE}{digits}"

def compute_listing_stats(products: Iterable[Product]) -> ListingStats:
    """Count listings and total their views"""
    products = list(products)
    return ListingStats(
        total_products=len(products),
        total_views=sum(p.views or 0 for p in products)
    )

def generate_image_key(original_filename: str, prefix: Optional[str] = None) -> str:
    """
    Random storage key that keeps the original extension

    Args:
        original_filename: Name of the picked file
        prefix: Optional owner id to prepend

    Returns:
        Key such as "<prefix>-<hex>.jpg"
    """
    ext = os.path.splitext(original_filename or "")[1].lower()
    name = uuid.uuid4().hex
    if prefix:
        name = f"{prefix}-{name}"
    return f"{name}{ext}"

def storage_key_from_url(image_url: Optional[str]) -> Optional[str]:
    """Last path segment of a public object URL"""
    if not image_url:
        return None
    path = urlparse(image_url).path
    key = unquote(path.rstrip("/").split("/")[-1])
    return key or None
