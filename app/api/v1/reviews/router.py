"""Reviews API router"""

from fastapi import APIRouter, Depends, Query

from app.core.backend import BackendClient
from app.core.exceptions import ConfirmationRequiredException
from app.core.session import SessionContext
from app.schemas.review import ReviewSectionView, ReviewSubmit
from app.services.review_service import ReviewSection
from app.utils.dependencies import get_backend, get_session

router = APIRouter()


@router.get("/{product_id}/reviews", response_model=ReviewSectionView)
async def get_reviews(
    product_id: str,
    backend: BackendClient = Depends(get_backend),
    session: SessionContext = Depends(get_session)
):
    """Reviews for a product, newest first"""
    section = ReviewSection(backend, session, product_id)
    return await section.load()


@router.post("/{product_id}/reviews", response_model=ReviewSectionView)
async def submit_review(
    product_id: str,
    review: ReviewSubmit,
    backend: BackendClient = Depends(get_backend),
    session: SessionContext = Depends(get_session)
):
    """Create the caller's review, or update it when one exists"""
    session.require_identity("leave a review")
    section = ReviewSection(backend, session, product_id)
    await section.load()
    return await section.submit(review.rating, review.comment)


@router.delete("/{product_id}/reviews/mine", response_model=ReviewSectionView)
async def delete_my_review(
    product_id: str,
    confirm: bool = Query(False, description="Must be true; deletion cannot be undone"),
    backend: BackendClient = Depends(get_backend),
    session: SessionContext = Depends(get_session)
):
    """Delete the caller's review"""
    session.require_identity("manage your review")
    if not confirm:
        raise ConfirmationRequiredException()
    section = ReviewSection(backend, session, product_id)
    await section.load()
    return await section.remove(confirmed=True)
