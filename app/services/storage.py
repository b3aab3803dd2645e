"""
Product image storage
Uploads listing images to the Supabase bucket and cleans them up
"""

from typing import Optional
import logging

from app.core.backend import BackendClient
from app.core.config import settings
from app.core.exceptions import BackendException
from app.schemas.product import ImageUpload
from app.utils.helpers import generate_image_key, storage_key_from_url

logger = logging.getLogger(__name__)

class StorageService:
    """Storage service for listing images"""

    def __init__(self, backend: BackendClient, bucket: Optional[str] = None):
        self.backend = backend
        self.bucket = bucket or settings.PRODUCT_IMAGE_BUCKET

    async def upload_image(self, image: ImageUpload, prefix: Optional[str] = None) -> str:
        """
        Upload an image under a random key

        Args:
            image: Picked file
            prefix: Optional key prefix (owner id)

        Returns:
            Public URL of the stored object
        """
        key = generate_image_key(image.filename, prefix)
        try:
            await self.backend.upload(self.bucket, key, image.content, image.content_type)
        except BackendException as e:
            logger.error(f"Failed to upload image {key}: {e.detail}")
            raise BackendException(f"Image upload failed: {e.detail}", "IMAGE_UPLOAD_FAILED")

        url = await self.backend.get_public_url(self.bucket, key)
        logger.info(f"Uploaded image {key}")
        return url

    async def delete_image(self, image_url: Optional[str]) -> bool:
        """
        Best-effort removal of a stored image

        Failures are logged and reported as False, never raised.
        """
        key = storage_key_from_url(image_url)
        if not key:
            return False

        try:
            await self.backend.remove(self.bucket, [key])
            logger.info(f"Deleted image {key}")
            return True
        except Exception as e:
            logger.error(f"Storage delete error for {key}: {e}")
            return False
