"""Product Pydantic schemas"""

from pydantic import Field, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from .base import BaseSchema, RecordId
from .user import Identity, Profile, SellerContact

class Product(BaseSchema):
    """Product row as stored by the backend"""
    id: RecordId
    name: str
    price: Decimal = Field(..., gt=0)
    image_url: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    views: int = 0
    average_rating: float = 0
    review_count: int = 0

    @field_validator('views', 'review_count', mode='before')
    @classmethod
    def default_counts(cls, v):
        return 0 if v is None else v

    @field_validator('average_rating', mode='before')
    @classmethod
    def default_rating(cls, v):
        return 0 if v is None else v

    @field_validator('user_id', mode='before')
    @classmethod
    def stringify_owner(cls, v):
        return None if v is None else str(v)


class ProductCard(BaseSchema):
    """Product as shown in a listing grid"""
    id: RecordId
    name: str
    price: Decimal
    price_label: str
    image_url: str
    created_at: Optional[datetime] = None
    listed: str
    rating_label: str
    average_rating: float = 0
    review_count: int = 0
    views: int = 0
    is_wishlisted: bool = False
    can_manage: bool = False


class CatalogView(BaseSchema):
    """State of the home screen"""
    products: List[ProductCard] = []
    total: int = 0
    result_count: int = 0
    search_term: str = ""
    sort: Optional[str] = None
    is_empty: bool = True
    no_results: bool = False


class ProductDetailView(BaseSchema):
    """State of the product detail screen"""
    product: ProductCard
    listed: str
    seller: SellerContact
    can_manage: bool = False


class ListingForm(BaseSchema):
    """Editable fields of an owned listing"""
    id: RecordId
    name: str
    price: Decimal
    image_url: Optional[str] = None


class ListingStats(BaseSchema):
    """Aggregates derived from a seller's listings"""
    total_products: int = 0
    total_views: int = 0


class ProfileView(BaseSchema):
    """State of the profile screen"""
    user: Identity
    profile: Optional[Profile] = None
    display_name: str
    phone: str
    joined: str
    products: List[ProductCard] = []
    stats: ListingStats = Field(default_factory=ListingStats)


class ImageUpload(BaseSchema):
    """Image selected in a file picker"""
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


class ListingCreatedResponse(BaseSchema):
    """Result of listing a product"""
    message: str
    product: Optional[ProductCard] = None
