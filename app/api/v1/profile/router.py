"""Profile API router"""

from fastapi import APIRouter, Depends, Query

from app.core.backend import BackendClient
from app.core.exceptions import ConfirmationRequiredException
from app.core.session import SessionContext
from app.schemas.product import ProfileView
from app.services.profile_service import Profile
from app.utils.dependencies import get_backend, get_session

router = APIRouter()


@router.get("/", response_model=ProfileView)
async def get_profile(
    backend: BackendClient = Depends(get_backend),
    session: SessionContext = Depends(get_session)
):
    """Profile details, own listings and listing stats"""
    profile = Profile(backend, session)
    return await profile.load()


@router.delete("/products/{product_id}", response_model=ProfileView)
async def delete_my_product(
    product_id: str,
    confirm: bool = Query(False, description="Must be true; deletion cannot be undone"),
    backend: BackendClient = Depends(get_backend),
    session: SessionContext = Depends(get_session)
):
    """Delete one of the caller's products and return the refreshed profile"""
    profile = Profile(backend, session)
    await profile.load()
    if not await profile.delete_product(product_id, confirmed=confirm):
        raise ConfirmationRequiredException()
    return profile.view()
