"""Unit tests for display helpers."""

from datetime import timedelta
from decimal import Decimal

import pytest

from app.schemas.product import Product
from app.utils.helpers import (
    call_url,
    compute_listing_stats,
    format_currency,
    generate_image_key,
    image_or_placeholder,
    joined_label,
    rating_label,
    relative_time,
    storage_key_from_url,
    whatsapp_url,
)
from app.core.config import settings

from tests.fakes import utc

NOW = utc(2026, 3, 10, 12, 0)


class TestRelativeTime:
    """Listing ages."""

    def test_missing_timestamp(self):
        assert relative_time(None, NOW) == "Recently"

    @pytest.mark.parametrize("delta, expected", [
        (timedelta(seconds=30), "Just now"),
        (timedelta(minutes=1), "1 minute ago"),
        (timedelta(minutes=45), "45 minutes ago"),
        (timedelta(hours=1), "1 hour ago"),
        (timedelta(hours=23, minutes=59), "23 hours ago"),
        (timedelta(days=1), "1 day ago"),
        (timedelta(days=29), "29 days ago"),
    ])
    def test_buckets(self, delta, expected):
        """Ages are reported in the largest whole unit."""
        assert relative_time(NOW - delta, NOW) == expected

    def test_older_than_thirty_days_shows_date(self):
        """Old listings show a long date."""
        assert relative_time(utc(2026, 1, 5), NOW) == "5 January 2026"

    def test_accepts_iso_strings(self):
        """Backend timestamps arrive as ISO strings."""
        assert relative_time("2026-03-10T11:00:00Z", NOW) == "1 hour ago"

    def test_future_timestamp_is_just_now(self):
        """Clock skew never produces negative ages."""
        assert relative_time(NOW + timedelta(minutes=5), NOW) == "Just now"


class TestJoinedLabel:
    """Profile membership age."""

    @pytest.mark.parametrize("delta, expected", [
        (timedelta(hours=3), "Today"),
        (timedelta(days=1, hours=2), "Yesterday"),
        (timedelta(days=12), "12 days ago"),
    ])
    def test_recent(self, delta, expected):
        assert joined_label(NOW - delta, NOW) == expected

    def test_old_account_shows_short_date(self):
        assert joined_label(utc(2025, 11, 2), NOW) == "2/11/2025"


class TestFormatting:
    """Price and rating labels."""

    @pytest.mark.parametrize("amount, expected", [
        (Decimal("999"), "₹999.00"),
        (Decimal("1234"), "₹1,234.00"),
        (1234567.5, "₹12,34,567.50"),
    ])
    def test_indian_grouping(self, amount, expected):
        """Thousands, then lakhs and crores."""
        assert format_currency(amount) == expected

    def test_no_ratings(self):
        assert rating_label(0, 0) == "No ratings yet"

    def test_rating_summary(self):
        """Averages show one decimal and a pluralised count."""
        assert rating_label(4.5, 3) == "⭐ 4.5 (3 reviews)"
        assert rating_label(5, 1) == "⭐ 5.0 (1 review)"

    def test_placeholder_image(self):
        assert image_or_placeholder(None) == settings.PLACEHOLDER_IMAGE_URL
        assert image_or_placeholder("https://img/x.jpg") == "https://img/x.jpg"


class TestContactLinks:
    """Seller call and WhatsApp actions."""

    def test_call_url(self):
        assert call_url("98765 43210") == "tel:9876543210"

    def test_whatsapp_url_adds_country_code(self):
        assert whatsapp_url("9876543210") == "https://wa.me/919876543210"

    @pytest.mark.parametrize("phone", [None, "", "Not provided", "12345"])
    def test_no_links_for_invalid_phone(self, phone):
        """Contact actions are hidden without a real number."""
        assert call_url(phone) is None
        assert whatsapp_url(phone) is None


class TestListingStats:
    """Aggregates over a seller's products."""

    def test_counts_and_views(self):
        products = [
            Product(id=1, name="Bike", price=100, views=10),
            Product(id=2, name="Lamp", price=50, views=None),
            Product(id=3, name="Desk", price=900, views=5),
        ]
        stats = compute_listing_stats(products)
        assert stats.total_products == 3
        assert stats.total_views == 15

    def test_empty(self):
        stats = compute_listing_stats([])
        assert (stats.total_products, stats.total_views) == (0, 0)


class TestStorageKeys:
    """Object names in the image bucket."""

    def test_generated_key_keeps_extension(self):
        key = generate_image_key("Holiday.PNG", prefix="user-1")
        assert key.startswith("user-1-")
        assert key.endswith(".png")

    def test_generated_keys_are_unique(self):
        assert generate_image_key("a.jpg") != generate_image_key("a.jpg")

    def test_key_from_public_url(self):
        url = "https://x.supabase.co/storage/v1/object/public/product-images/user-1-abc.jpg"
        assert storage_key_from_url(url) == "user-1-abc.jpg"

    def test_key_from_missing_url(self):
        assert storage_key_from_url(None) is None
