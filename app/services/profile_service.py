"""
Profile
The signed-in identity's own listings and stats
"""

from typing import List, Optional
import logging

from app.core.backend import BackendClient
from app.core.exceptions import MarketplaceException
from app.core.session import SessionContext
from app.schemas.base import RecordId
from app.schemas.product import ListingStats, Product, ProfileView
from app.schemas.user import Profile as ProfileRow
from app.services.product_service import ProductService, to_product_card
from app.services.session_service import PROFILES_TABLE
from app.utils.helpers import compute_listing_stats, joined_label

logger = logging.getLogger(__name__)

class Profile:
    """View-model for the profile screen"""

    def __init__(
        self,
        backend: BackendClient,
        session: SessionContext,
        products: Optional[ProductService] = None,
    ):
        self.backend = backend
        self.session = session
        self.product_service = products or ProductService(backend)
        self.profile: Optional[ProfileRow] = None
        self.products: List[Product] = []
        self.stats = ListingStats()

    async def load(self) -> ProfileView:
        """Fetch the profile row, then the identity's products, then derive stats"""
        identity = self.session.require_identity("view your profile")

        try:
            row = await self.backend.select(
                PROFILES_TABLE,
                filters={"id": identity.id},
                single=True,
            )
            self.profile = ProfileRow.model_validate(row) if row else None
        except MarketplaceException as e:
            logger.warning(f"Profile row for {identity.id} unavailable: {e.detail}")
            self.profile = None

        self.products = await self.product_service.list_by_owner(identity.id)
        self.stats = compute_listing_stats(self.products)
        return self.view()

    async def delete_product(
        self,
        product_id: RecordId,
        confirmed: bool = False
    ) -> bool:
        """Delete one of the identity's products and recompute stats"""
        if not confirmed:
            return False
        await self.product_service.delete_product(product_id, self.session)
        self.products = [p for p in self.products if str(p.id) != str(product_id)]
        self.stats = compute_listing_stats(self.products)
        return True

    def view(self) -> ProfileView:
        identity = self.session.require_identity("view your profile")
        name = (self.profile.name if self.profile else None) or identity.name
        phone = (self.profile.phone if self.profile else None) or identity.phone
        return ProfileView(
            user=identity,
            profile=self.profile,
            display_name=name or "User",
            phone=phone or "Not provided",
            joined=joined_label(identity.created_at),
            products=[to_product_card(p, self.session) for p in self.products],
            stats=self.stats,
        )
