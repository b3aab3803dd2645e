"""Wishlist schemas"""

from typing import List, Optional
from datetime import datetime

from .base import BaseSchema, RecordId
from .product import ProductCard

class WishlistEntry(BaseSchema):
    """Saved product of the current identity"""
    id: RecordId
    created_at: Optional[datetime] = None
    saved_on: Optional[str] = None
    product: ProductCard

class WishlistView(BaseSchema):
    """State of the wishlist screen"""
    items: List[WishlistEntry] = []
    is_empty: bool = True

class WishlistToggleResponse(BaseSchema):
    """Membership after a toggle"""
    product_id: RecordId
    is_wishlisted: bool
    message: str
