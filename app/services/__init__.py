"""Services package"""

from .storage import StorageService
from .session_service import SessionManager
from .catalog import Catalog
from .listing_service import ListingEditor
from .product_detail import ProductDetail
from .review_service import ReviewSection
from .wishlist_service import Wishlist
from .profile_service import Profile

__all__ = [
    "StorageService",
    "SessionManager",
    "Catalog",
    "ListingEditor",
    "ProductDetail",
    "ReviewSection",
    "Wishlist",
    "Profile"
]
