"""
Product detail
One listing with its seller's contact details
"""

from typing import Optional
import logging

from app.core.backend import BackendClient
from app.core.exceptions import MarketplaceException
from app.core.session import SessionContext
from app.schemas.base import RecordId
from app.schemas.product import Product, ProductDetailView
from app.schemas.user import SellerContact
from app.services.product_service import ProductService, to_product_card
from app.services.session_service import PROFILES_TABLE
from app.utils.helpers import call_url, relative_time, whatsapp_url

logger = logging.getLogger(__name__)

class ProductDetail:
    """View-model for the product detail screen"""

    def __init__(
        self,
        backend: BackendClient,
        session: SessionContext,
        products: Optional[ProductService] = None,
    ):
        self.backend = backend
        self.session = session
        self.product_service = products or ProductService(backend)
        self.product: Optional[Product] = None
        self.seller: Optional[SellerContact] = None

    async def load_seller(self, user_id: Optional[str]) -> SellerContact:
        """Seller's public profile, or a placeholder when it cannot be read"""
        if not user_id:
            return SellerContact.fallback()
        try:
            row = await self.backend.select(
                PROFILES_TABLE,
                columns="name, phone",
                filters={"id": user_id},
                single=True,
            )
        except MarketplaceException as e:
            logger.warning(f"Seller profile {user_id} unavailable: {e.detail}")
            return SellerContact.fallback()
        if not row:
            return SellerContact.fallback()

        phone = row.get("phone")
        return SellerContact(
            name=row.get("name") or "Anonymous Seller",
            phone=phone or "Not provided",
            call_url=call_url(phone),
            whatsapp_url=whatsapp_url(phone),
        )

    async def load_detail(self, product_id: RecordId) -> Optional[ProductDetailView]:
        """
        Fetch the product and its seller

        Returns:
            Detail view, or None when the product cannot be loaded
        """
        try:
            self.product = await self.product_service.get_product(product_id)
        except MarketplaceException as e:
            logger.error(f"Error fetching product {product_id}: {e.detail}")
            self.product = None
            self.seller = None
            return None

        self.seller = await self.load_seller(self.product.user_id)
        card = to_product_card(self.product, self.session)
        return ProductDetailView(
            product=card,
            listed=relative_time(self.product.created_at),
            seller=self.seller,
            can_manage=card.can_manage,
        )
