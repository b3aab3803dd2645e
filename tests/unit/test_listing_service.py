"""Unit tests for creating and editing listings."""

from decimal import Decimal

import pytest

from app.core.config import settings
from app.core.exceptions import (
    BackendException,
    ImageTooLargeException,
    LoginRequiredException,
    NotOwnerException,
    ValidationException,
)
from app.schemas.product import ImageUpload
from app.services.catalog import Catalog
from app.services.listing_service import ListingEditor

BUCKET = settings.PRODUCT_IMAGE_BUCKET


def image(name="bike.jpg", size=16):
    return ImageUpload(filename=name, content=b"x" * size, content_type="image/jpeg")


def stored_keys(backend):
    return sorted(backend.objects.get(BUCKET, {}))


def seed_owned(backend, owner_id="owner-1"):
    backend.objects[BUCKET] = {"old.jpg": b"old"}
    return backend.seed(
        "products",
        id=7,
        name="Old Bike",
        price=1500,
        user_id=owner_id,
        image_url=backend.public_url(BUCKET, "old.jpg"),
    )


class TestCreateListing:
    """Upload the image, then insert the row."""

    @pytest.mark.asyncio
    async def test_requires_login(self, backend, session):
        with pytest.raises(LoginRequiredException):
            await ListingEditor(backend, session).create("Bike", "500", image())
        assert backend.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name, price, with_image", [
        ("", "500", True),
        ("Bike", "", True),
        ("Bike", "500", False),
    ])
    async def test_missing_fields(self, backend, owner_session, name, price, with_image):
        editor = ListingEditor(backend, owner_session)
        with pytest.raises(ValidationException) as exc:
            await editor.create(name, price, image() if with_image else None)
        assert exc.value.detail == "Please fill all fields"
        assert "upload" not in backend.calls

    @pytest.mark.asyncio
    async def test_non_positive_price_not_uploaded(self, backend, owner_session):
        with pytest.raises(ValidationException):
            await ListingEditor(backend, owner_session).create("Bike", "0", image())
        assert stored_keys(backend) == []

    @pytest.mark.asyncio
    async def test_sub_paisa_price_not_stored(self, backend, owner_session):
        with pytest.raises(ValidationException) as exc:
            await ListingEditor(backend, owner_session).create("Bike", "0.001", image())
        assert exc.value.detail == "Price must be greater than 0"
        assert stored_keys(backend) == []
        assert backend.rows("products") == []

    @pytest.mark.asyncio
    async def test_large_image_not_uploaded(self, backend, owner_session):
        big = image(size=settings.MAX_IMAGE_SIZE + 1)
        with pytest.raises(ImageTooLargeException):
            await ListingEditor(backend, owner_session).create("Bike", "500", big)
        assert stored_keys(backend) == []

    @pytest.mark.asyncio
    async def test_create_stores_image_and_row(self, backend, owner_session):
        product = await ListingEditor(backend, owner_session).create("Road Bike", "4999.5", image())

        keys = stored_keys(backend)
        assert len(keys) == 1
        assert keys[0].startswith("owner-1-")
        assert keys[0].endswith(".jpg")

        row = backend.rows("products")[0]
        assert row["user_id"] == "owner-1"
        assert row["price"] == 4999.5
        assert row["image_url"] == backend.public_url(BUCKET, keys[0])
        assert product.name == "Road Bike"
        assert product.price == Decimal("4999.50")

    @pytest.mark.asyncio
    async def test_created_product_appears_in_catalog(self, backend, owner_session):
        await ListingEditor(backend, owner_session).create("Road Bike", "500", image())
        view = await Catalog(backend, owner_session).load_all()
        assert [card.name for card in view.products] == ["Road Bike"]
        assert view.products[0].can_manage is True

    @pytest.mark.asyncio
    async def test_insert_failure_leaves_uploaded_image(self, backend, owner_session):
        """Upload succeeds, insert fails: no product, but the image stays."""
        backend.fail("insert:products")

        with pytest.raises(BackendException):
            await ListingEditor(backend, owner_session).create("Road Bike", "500", image())

        view = await Catalog(backend, owner_session).load_all()
        assert view.is_empty is True
        assert len(stored_keys(backend)) == 1

    @pytest.mark.asyncio
    async def test_insert_failure_with_compensation(self, backend, owner_session, monkeypatch):
        monkeypatch.setattr(settings, "COMPENSATE_ORPHANED_UPLOADS", True)
        backend.fail("insert:products")

        with pytest.raises(BackendException):
            await ListingEditor(backend, owner_session).create("Road Bike", "500", image())

        assert stored_keys(backend) == []

    @pytest.mark.asyncio
    async def test_upload_failure(self, backend, owner_session):
        backend.fail("upload")

        with pytest.raises(BackendException) as exc:
            await ListingEditor(backend, owner_session).create("Road Bike", "500", image())

        assert exc.value.error_code == "IMAGE_UPLOAD_FAILED"
        assert backend.rows("products") == []


class TestEditListing:
    """Owner-only edits with optional image replacement."""

    @pytest.mark.asyncio
    async def test_load_for_edit(self, backend, owner_session):
        seed_owned(backend)
        form = await ListingEditor(backend, owner_session).load_for_edit(7)
        assert (form.name, form.price) == ("Old Bike", Decimal("1500"))

    @pytest.mark.asyncio
    async def test_non_owner_cannot_edit(self, backend, buyer_session):
        seed_owned(backend)
        with pytest.raises(NotOwnerException) as exc:
            await ListingEditor(backend, buyer_session).load_for_edit(7)
        assert exc.value.detail == "You can only edit your own products!"

    @pytest.mark.asyncio
    async def test_anonymous_cannot_edit(self, backend, session):
        seed_owned(backend)
        with pytest.raises(LoginRequiredException):
            await ListingEditor(backend, session).load_for_edit(7)

    @pytest.mark.asyncio
    async def test_save_without_new_image(self, backend, owner_session):
        row = seed_owned(backend)
        old_url = row["image_url"]

        form = await ListingEditor(backend, owner_session).save(7, "Old Bike v2", "1200")

        assert form.image_url == old_url
        stored = backend.rows("products")[0]
        assert (stored["name"], stored["price"]) == ("Old Bike v2", 1200.0)
        assert stored_keys(backend) == ["old.jpg"]

    @pytest.mark.asyncio
    async def test_save_replaces_image(self, backend, owner_session):
        """The previous object is deleted and the new one referenced."""
        seed_owned(backend)

        form = await ListingEditor(backend, owner_session).save(7, "Old Bike", "1500", image("new.png"))

        keys = stored_keys(backend)
        assert "old.jpg" not in keys
        assert len(keys) == 1 and keys[0].endswith(".png")
        assert form.image_url == backend.public_url(BUCKET, keys[0])
        assert backend.rows("products")[0]["image_url"] == form.image_url

    @pytest.mark.asyncio
    async def test_large_replacement_rejected(self, backend, owner_session):
        seed_owned(backend)
        big = image(size=settings.MAX_IMAGE_SIZE + 1)

        with pytest.raises(ImageTooLargeException):
            await ListingEditor(backend, owner_session).save(7, "Old Bike", "1500", big)
        assert stored_keys(backend) == ["old.jpg"]

    @pytest.mark.asyncio
    async def test_update_failure_keeps_row(self, backend, owner_session):
        seed_owned(backend)
        backend.fail("update:products")

        with pytest.raises(BackendException):
            await ListingEditor(backend, owner_session).save(7, "Renamed", "10", image("new.png"))

        assert backend.rows("products")[0]["name"] == "Old Bike"
        # new object left behind while compensation is off
        assert len(stored_keys(backend)) == 1

    @pytest.mark.asyncio
    async def test_invalid_price_on_save(self, backend, owner_session):
        seed_owned(backend)
        with pytest.raises(ValidationException):
            await ListingEditor(backend, owner_session).save(7, "Old Bike", "-1")
        assert "update:products" not in backend.calls
