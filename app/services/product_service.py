"""
Product service layer
Reads and writes product rows and maps them to view cards
"""

from typing import Any, Collection, Dict, List, Optional
from decimal import Decimal
from datetime import datetime
import logging

from app.core.backend import BackendClient
from app.core.exceptions import NotFoundException, NotOwnerException
from app.core.session import SessionContext
from app.schemas.base import RecordId
from app.schemas.product import Product, ProductCard
from app.services.storage import StorageService
from app.utils.helpers import (
    format_currency,
    image_or_placeholder,
    rating_label,
    relative_time,
)

logger = logging.getLogger(__name__)

PRODUCTS_TABLE = "products"

# Columns the listing grid needs
CARD_COLUMNS = "id, name, price, image_url, user_id, created_at, views, average_rating, review_count"

def to_product_card(
    product: Product,
    session: Optional[SessionContext] = None,
    wishlist_ids: Collection[str] = (),
    now: Optional[datetime] = None,
) -> ProductCard:
    """Map a product row to what a grid cell shows"""
    return ProductCard(
        id=product.id,
        name=product.name,
        price=product.price,
        price_label=format_currency(product.price),
        image_url=image_or_placeholder(product.image_url),
        created_at=product.created_at,
        listed=relative_time(product.created_at, now),
        rating_label=rating_label(product.average_rating, product.review_count),
        average_rating=product.average_rating,
        review_count=product.review_count,
        views=product.views,
        is_wishlisted=str(product.id) in wishlist_ids,
        can_manage=bool(session and session.owns(product.user_id)),
    )

class ProductService:
    """Product data access over the backend tables"""

    def __init__(self, backend: BackendClient, storage: Optional[StorageService] = None):
        self.backend = backend
        self.storage = storage or StorageService(backend)

    async def list_products(self) -> List[Product]:
        """All products, newest first"""
        rows = await self.backend.select(
            PRODUCTS_TABLE,
            columns=CARD_COLUMNS,
            order_by="created_at",
            descending=True,
        )
        return [Product.model_validate(row) for row in rows]

    async def list_by_owner(self, user_id: str) -> List[Product]:
        rows = await self.backend.select(
            PRODUCTS_TABLE,
            filters={"user_id": user_id},
            order_by="created_at",
            descending=True,
        )
        return [Product.model_validate(row) for row in rows]

    async def get_product(self, product_id: RecordId) -> Product:
        """
        Get a single product

        Raises:
            NotFoundException: If no product has this id
        """
        row = await self.backend.select(
            PRODUCTS_TABLE,
            filters={"id": product_id},
            single=True,
        )
        if not row:
            raise NotFoundException("Product not found")
        return Product.model_validate(row)

    async def get_owned_product(self, product_id: RecordId, session: SessionContext) -> Product:
        """Get a product and check the signed-in identity owns it"""
        session.require_identity("manage your products")
        product = await self.get_product(product_id)
        if not session.owns(product.user_id):
            raise NotOwnerException()
        return product

    async def create_product(
        self,
        name: str,
        price: Decimal,
        image_url: str,
        user_id: str
    ) -> Optional[Product]:
        rows = await self.backend.insert(PRODUCTS_TABLE, [{
            "name": name,
            "price": float(price),
            "image_url": image_url,
            "user_id": user_id,
        }])
        return Product.model_validate(rows[0]) if rows else None

    async def update_product(self, product_id: RecordId, patch: Dict[str, Any]) -> None:
        if "price" in patch:
            patch = {**patch, "price": float(patch["price"])}
        await self.backend.update(PRODUCTS_TABLE, patch, {"id": product_id})

    async def delete_product(
        self,
        product_id: RecordId,
        session: SessionContext
    ) -> None:
        """
        Delete a listing and its stored image

        The image is removed first; a storage failure is logged and the
        record is deleted anyway.
        """
        identity = session.require_identity("delete products")
        product = await self.get_product(product_id)
        if not session.owns(product.user_id):
            raise NotOwnerException("You can only delete your own products!")

        await self.storage.delete_image(product.image_url)
        await self.backend.delete(PRODUCTS_TABLE, {"id": product_id})
        logger.info(f"Product {product_id} deleted by {identity.id}")
