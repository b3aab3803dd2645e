"""Products API router"""

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from typing import Optional

from app.core.backend import BackendClient
from app.core.exceptions import ConfirmationRequiredException, NotFoundException
from app.core.session import SessionContext
from app.schemas.product import (
    CatalogView,
    ListingCreatedResponse,
    ListingForm,
    ProductDetailView,
)
from app.schemas.user import MessageResponse
from app.schemas.wishlist import WishlistToggleResponse
from app.services.catalog import Catalog
from app.services.listing_service import LISTING_CREATED, LISTING_UPDATED, ListingEditor
from app.services.product_detail import ProductDetail
from app.services.product_service import to_product_card
from app.services.wishlist_service import toggle_response
from app.utils.dependencies import get_backend, get_session, read_image_upload

router = APIRouter()


@router.get("/", response_model=CatalogView)
async def get_products(
    q: Optional[str] = Query(None, description="Search in product names"),
    sort: Optional[str] = Query(None, description="newest, oldest, price-low or price-high"),
    backend: BackendClient = Depends(get_backend),
    session: SessionContext = Depends(get_session)
):
    """All products, optionally searched and then sorted"""
    catalog = Catalog(backend, session)
    view = await catalog.load_all()
    if q is not None:
        view = catalog.search(q)
    if sort:
        view = catalog.sort(sort)
    return view


@router.post("/", response_model=ListingCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    name: str = Form(""),
    price: str = Form(""),
    image: Optional[UploadFile] = File(None),
    backend: BackendClient = Depends(get_backend),
    session: SessionContext = Depends(get_session)
):
    """List a new product"""
    editor = ListingEditor(backend, session)
    upload = await read_image_upload(image)
    product = await editor.create(name, price, upload)
    return ListingCreatedResponse(
        message=LISTING_CREATED,
        product=to_product_card(product, session) if product else None,
    )


@router.get("/{product_id}", response_model=ProductDetailView)
async def get_product(
    product_id: str,
    backend: BackendClient = Depends(get_backend),
    session: SessionContext = Depends(get_session)
):
    """Product with seller contact details"""
    detail = ProductDetail(backend, session)
    view = await detail.load_detail(product_id)
    if view is None:
        raise NotFoundException("Product not found")
    return view


@router.get("/{product_id}/edit", response_model=ListingForm)
async def get_product_for_edit(
    product_id: str,
    backend: BackendClient = Depends(get_backend),
    session: SessionContext = Depends(get_session)
):
    """Owned product as an edit form"""
    editor = ListingEditor(backend, session)
    return await editor.load_for_edit(product_id)


@router.put("/{product_id}", response_model=MessageResponse)
async def update_product(
    product_id: str,
    name: str = Form(""),
    price: str = Form(""),
    image: Optional[UploadFile] = File(None),
    backend: BackendClient = Depends(get_backend),
    session: SessionContext = Depends(get_session)
):
    """Save edits to an owned product"""
    editor = ListingEditor(backend, session)
    upload = await read_image_upload(image)
    await editor.save(product_id, name, price, upload)
    return MessageResponse(message=LISTING_UPDATED)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    confirm: bool = Query(False, description="Must be true; deletion cannot be undone"),
    backend: BackendClient = Depends(get_backend),
    session: SessionContext = Depends(get_session)
):
    """Delete an owned product and its image"""
    catalog = Catalog(backend, session)
    if not await catalog.delete_product(product_id, confirmed=confirm):
        raise ConfirmationRequiredException()
    return None


@router.post("/{product_id}/wishlist", response_model=WishlistToggleResponse)
async def toggle_wishlist(
    product_id: str,
    backend: BackendClient = Depends(get_backend),
    session: SessionContext = Depends(get_session)
):
    """Add or remove a product from the wishlist"""
    session.require_identity("save products to wishlist")
    catalog = Catalog(backend, session)
    await catalog.load_wishlist()
    saved = await catalog.toggle_wishlist(product_id)
    return toggle_response(product_id, saved)
