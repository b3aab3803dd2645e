"""Wishlist API router"""

from fastapi import APIRouter, Depends

from app.core.backend import BackendClient
from app.core.session import SessionContext
from app.schemas.wishlist import WishlistView
from app.services.wishlist_service import Wishlist
from app.utils.dependencies import get_backend, get_session

router = APIRouter()


@router.get("/", response_model=WishlistView)
async def get_wishlist(
    backend: BackendClient = Depends(get_backend),
    session: SessionContext = Depends(get_session)
):
    """Saved products, most recently saved first"""
    wishlist = Wishlist(backend, session)
    return await wishlist.load()


@router.delete("/{entry_id}", response_model=WishlistView)
async def remove_from_wishlist(
    entry_id: str,
    backend: BackendClient = Depends(get_backend),
    session: SessionContext = Depends(get_session)
):
    """Remove an entry and return the remaining list"""
    wishlist = Wishlist(backend, session)
    await wishlist.load()
    return await wishlist.remove(entry_id)
