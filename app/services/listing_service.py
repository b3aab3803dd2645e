"""
Listing editor
Creates new listings and edits owned ones
"""

from typing import Optional
import logging

from app.core.backend import BackendClient
from app.core.config import settings
from app.core.exceptions import BackendException, ValidationException
from app.core.session import SessionContext
from app.schemas.base import RecordId
from app.schemas.product import ImageUpload, ListingForm, Product
from app.services.product_service import ProductService
from app.services.storage import StorageService
from app.utils.validators import (
    validate_image_upload,
    validate_price,
    validate_product_name,
)

logger = logging.getLogger(__name__)

LISTING_CREATED = "Product listed successfully!"
LISTING_UPDATED = "Product updated successfully!"

class ListingEditor:
    """View-model for the sell and edit screens"""

    def __init__(
        self,
        backend: BackendClient,
        session: SessionContext,
        storage: Optional[StorageService] = None,
        products: Optional[ProductService] = None,
    ):
        self.session = session
        self.storage = storage or StorageService(backend)
        self.product_service = products or ProductService(backend, self.storage)
        self.product: Optional[Product] = None

    async def _discard_upload(self, image_url: str) -> None:
        if settings.COMPENSATE_ORPHANED_UPLOADS:
            logger.warning(f"Record write failed, removing uploaded image {image_url}")
            await self.storage.delete_image(image_url)
        else:
            logger.warning(f"Record write failed, uploaded image left in storage: {image_url}")

    async def create(self, name: str, price, image: Optional[ImageUpload]) -> Optional[Product]:
        """
        List a new product

        The image is uploaded first, then the row is inserted. If the insert
        fails the uploaded object stays in storage unless
        COMPENSATE_ORPHANED_UPLOADS is enabled.
        """
        identity = self.session.require_identity("sell products")

        if not name or price in (None, "") or image is None:
            raise ValidationException("Please fill all fields", "MISSING_FIELDS")
        name = validate_product_name(name)
        price = validate_price(price)
        validate_image_upload(image.filename, image.size)

        image_url = await self.storage.upload_image(image, prefix=identity.id)

        try:
            product = await self.product_service.create_product(name, price, image_url, identity.id)
        except BackendException:
            await self._discard_upload(image_url)
            raise

        logger.info(f"Listing created by {identity.id}: {name}")
        return product

    async def load_for_edit(self, product_id: RecordId) -> ListingForm:
        """Load an owned product into the edit form"""
        self.product = await self.product_service.get_owned_product(product_id, self.session)
        return ListingForm(
            id=self.product.id,
            name=self.product.name,
            price=self.product.price,
            image_url=self.product.image_url,
        )

    async def save(
        self,
        product_id: RecordId,
        name: str,
        price,
        new_image: Optional[ImageUpload] = None
    ) -> ListingForm:
        """
        Save edits to an owned product

        When a new image is given the old object is deleted before the new
        one is uploaded.
        """
        if self.product is None or str(self.product.id) != str(product_id):
            await self.load_for_edit(product_id)

        name = validate_product_name(name)
        price = validate_price(price)
        if new_image is not None:
            validate_image_upload(new_image.filename, new_image.size)

        image_url = self.product.image_url
        uploaded_url = None
        if new_image is not None:
            await self.storage.delete_image(self.product.image_url)
            uploaded_url = await self.storage.upload_image(new_image)
            image_url = uploaded_url

        try:
            await self.product_service.update_product(product_id, {
                "name": name,
                "price": price,
                "image_url": image_url,
            })
        except BackendException:
            if uploaded_url:
                await self._discard_upload(uploaded_url)
            raise

        self.product = self.product.model_copy(update={
            "name": name,
            "price": price,
            "image_url": image_url,
        })
        logger.info(f"Listing {product_id} updated")
        return ListingForm(id=self.product.id, name=name, price=price, image_url=image_url)
