"""
Catalog
Home screen listing with client-side search, sort and wishlist toggles
"""

from enum import Enum
from typing import List, Optional, Set
import logging

from app.core.backend import BackendClient
from app.core.exceptions import BackendException, ValidationException
from app.core.session import SessionContext
from app.schemas.base import RecordId
from app.schemas.product import CatalogView, Product
from app.services.product_service import ProductService, to_product_card
from app.services.wishlist_service import WishlistService

logger = logging.getLogger(__name__)

class SortKey(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"

def _created_ts(product: Product) -> float:
    return product.created_at.timestamp() if product.created_at else 0.0

def sort_products(products: List[Product], key: SortKey) -> List[Product]:
    """Stable sort by creation time or price"""
    if key == SortKey.NEWEST:
        return sorted(products, key=_created_ts, reverse=True)
    if key == SortKey.OLDEST:
        return sorted(products, key=_created_ts)
    if key == SortKey.PRICE_LOW:
        return sorted(products, key=lambda p: p.price)
    if key == SortKey.PRICE_HIGH:
        return sorted(products, key=lambda p: p.price, reverse=True)
    return list(products)

def filter_products(products: List[Product], term: str) -> List[Product]:
    """Case-insensitive substring match on the product name"""
    term = (term or "").strip().lower()
    if not term:
        return list(products)
    return [p for p in products if term in p.name.lower()]

class Catalog:
    """View-model for the product grid"""

    def __init__(
        self,
        backend: BackendClient,
        session: SessionContext,
        products: Optional[ProductService] = None,
        wishlist: Optional[WishlistService] = None,
    ):
        self.session = session
        self.product_service = products or ProductService(backend)
        self.wishlist_service = wishlist or WishlistService(backend, session)
        self.products: List[Product] = []
        self.displayed: List[Product] = []
        self.wishlist_ids: Set[str] = set()
        self.search_term = ""
        self.sort_key: Optional[SortKey] = None

    async def load_all(self) -> CatalogView:
        """Fetch every product newest first and the caller's wishlist"""
        self.products = await self.product_service.list_products()
        self.displayed = list(self.products)
        self.search_term = ""
        self.sort_key = None

        await self.load_wishlist()
        return self.view()

    async def load_wishlist(self) -> None:
        """Membership of the signed-in identity; failures leave it empty"""
        self.wishlist_ids = set()
        if not self.session.is_authenticated:
            return
        try:
            self.wishlist_ids = await self.wishlist_service.product_ids()
        except BackendException as e:
            logger.error(f"Error fetching wishlist: {e.detail}")

    def search(self, term: str) -> CatalogView:
        """Re-filter from the full list; replaces any previous sort"""
        self.search_term = term or ""
        self.displayed = filter_products(self.products, self.search_term)
        self.sort_key = None
        return self.view()

    def sort(self, key) -> CatalogView:
        """Reorder the displayed list in place"""
        try:
            sort_key = SortKey(key)
        except ValueError:
            raise ValidationException(
                f"Unknown sort '{key}'. Use one of: {', '.join(k.value for k in SortKey)}",
                "INVALID_SORT"
            )
        self.displayed = sort_products(self.displayed, sort_key)
        self.sort_key = sort_key
        return self.view()

    def is_wishlisted(self, product_id: RecordId) -> bool:
        return str(product_id) in self.wishlist_ids

    async def toggle_wishlist(self, product_id: RecordId) -> bool:
        """
        Add or remove a product from the wishlist

        Local membership is updated straight away without a re-fetch.

        Returns:
            True when the product is now saved
        """
        self.session.require_identity("save products to wishlist")
        saved = await self.wishlist_service.toggle(product_id, self.is_wishlisted(product_id))
        if saved:
            self.wishlist_ids.add(str(product_id))
        else:
            self.wishlist_ids.discard(str(product_id))
        return saved

    async def delete_product(
        self,
        product_id: RecordId,
        confirmed: bool = False
    ) -> bool:
        """
        Delete an owned product after confirmation

        Returns:
            False when the deletion was not confirmed
        """
        if not confirmed:
            return False
        await self.product_service.delete_product(product_id, self.session)
        self.products = [p for p in self.products if str(p.id) != str(product_id)]
        self.displayed = [p for p in self.displayed if str(p.id) != str(product_id)]
        return True

    def view(self) -> CatalogView:
        cards = [
            to_product_card(p, self.session, self.wishlist_ids)
            for p in self.displayed
        ]
        searching = bool(self.search_term.strip())
        return CatalogView(
            products=cards,
            total=len(self.products),
            result_count=len(cards),
            search_term=self.search_term,
            sort=self.sort_key.value if self.sort_key else None,
            is_empty=not self.products,
            no_results=bool(self.products) and searching and not cards,
        )
