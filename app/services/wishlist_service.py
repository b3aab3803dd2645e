"""
Wishlist service
Saved products of the current identity
"""

from typing import List, Set
import logging

from app.core.backend import BackendClient, Expand
from app.core.session import SessionContext
from app.schemas.base import RecordId
from app.schemas.product import Product
from app.schemas.wishlist import WishlistEntry, WishlistToggleResponse, WishlistView
from app.services.product_service import CARD_COLUMNS, to_product_card
from app.utils.helpers import format_short_date

logger = logging.getLogger(__name__)

WISHLIST_TABLE = "wishlist"

class WishlistService:
    """Wishlist membership reads and writes"""

    def __init__(self, backend: BackendClient, session: SessionContext):
        self.backend = backend
        self.session = session

    async def product_ids(self) -> Set[str]:
        """Ids of the products saved by the signed-in identity"""
        if not self.session.is_authenticated:
            return set()
        rows = await self.backend.select(
            WISHLIST_TABLE,
            columns="product_id",
            filters={"user_id": self.session.user_id},
        )
        return {str(row["product_id"]) for row in rows}

    async def add(self, product_id: RecordId) -> None:
        identity = self.session.require_identity("save products to wishlist")
        await self.backend.insert(WISHLIST_TABLE, {
            "user_id": identity.id,
            "product_id": product_id,
        })

    async def remove_product(self, product_id: RecordId) -> None:
        identity = self.session.require_identity("save products to wishlist")
        await self.backend.delete(WISHLIST_TABLE, {
            "user_id": identity.id,
            "product_id": product_id,
        })

    async def toggle(self, product_id: RecordId, currently_saved: bool) -> bool:
        """Flip membership; returns the new state"""
        if currently_saved:
            await self.remove_product(product_id)
            return False
        await self.add(product_id)
        return True


class Wishlist:
    """View-model for the wishlist screen"""

    def __init__(self, backend: BackendClient, session: SessionContext):
        self.backend = backend
        self.session = session
        self.items: List[WishlistEntry] = []

    async def load(self) -> WishlistView:
        """
        Fetch saved entries joined with their product

        Entries whose product has since been deleted are dropped.
        """
        identity = self.session.require_identity("view your wishlist")
        rows = await self.backend.select(
            WISHLIST_TABLE,
            columns="id, created_at",
            filters={"user_id": identity.id},
            expand=[Expand("products", "product_id", "products", CARD_COLUMNS)],
            order_by="created_at",
            descending=True,
        )

        items = []
        for row in rows:
            product_row = row.get("products")
            if product_row is None:
                continue
            product = Product.model_validate(product_row)
            items.append(WishlistEntry(
                id=row["id"],
                created_at=row.get("created_at"),
                saved_on=format_short_date(row.get("created_at")),
                product=to_product_card(product, self.session, {str(product.id)}),
            ))

        skipped = len(rows) - len(items)
        if skipped:
            logger.info(f"Skipped {skipped} wishlist entries for deleted products")

        self.items = items
        return self.view()

    async def remove(self, entry_id: RecordId) -> WishlistView:
        """Delete an entry and drop it from the local list"""
        self.session.require_identity("manage your wishlist")
        await self.backend.delete(WISHLIST_TABLE, {"id": entry_id})
        self.items = [item for item in self.items if str(item.id) != str(entry_id)]
        return self.view()

    def view(self) -> WishlistView:
        return WishlistView(items=list(self.items), is_empty=not self.items)


def toggle_message(is_wishlisted: bool) -> str:
    return "Added to wishlist" if is_wishlisted else "Removed from wishlist"


def toggle_response(product_id: RecordId, is_wishlisted: bool) -> WishlistToggleResponse:
    return WishlistToggleResponse(
        product_id=product_id,
        is_wishlisted=is_wishlisted,
        message=toggle_message(is_wishlisted),
    )
