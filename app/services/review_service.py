"""
Review section
Lists reviews for a product and manages the caller's single review
"""

from datetime import datetime, timezone
from typing import List, Optional
import logging

from app.core.backend import BackendClient, Expand
from app.core.exceptions import BadRequestException
from app.core.session import SessionContext
from app.schemas.base import RecordId, same_id
from app.schemas.review import (
    Review,
    ReviewFormMode,
    ReviewItem,
    ReviewSectionView,
)
from app.services.session_service import PROFILES_TABLE
from app.utils.helpers import format_short_date
from app.utils.validators import normalize_comment, validate_rating

logger = logging.getLogger(__name__)

REVIEWS_TABLE = "reviews"
DEFAULT_RATING = 5

class ReviewSection:
    """
    View-model for the reviews under a product

    Form states: HIDDEN -> CREATE or EDIT on open_form(); submit(), cancel()
    and remove() all return to HIDDEN.
    """

    def __init__(self, backend: BackendClient, session: SessionContext, product_id: RecordId):
        self.backend = backend
        self.session = session
        self.product_id = product_id
        self.reviews: List[Review] = []
        self.my_review: Optional[Review] = None
        self.form_mode = ReviewFormMode.HIDDEN
        self.draft_rating = DEFAULT_RATING
        self.draft_comment = ""

    async def load(self) -> ReviewSectionView:
        """Fetch reviews newest first and find the caller's own"""
        rows = await self.backend.select(
            REVIEWS_TABLE,
            filters={"product_id": self.product_id},
            expand=[Expand("profiles", "user_id", PROFILES_TABLE, "name")],
            order_by="created_at",
            descending=True,
        )
        self.reviews = [Review.from_row(row) for row in rows]

        self.my_review = None
        if self.session.is_authenticated:
            for review in self.reviews:
                if same_id(review.user_id, self.session.user_id):
                    self.my_review = review
                    break

        if self.my_review:
            self.draft_rating = self.my_review.rating
            self.draft_comment = self.my_review.comment or ""
        return self.view()

    def open_form(self) -> ReviewSectionView:
        """Show the form for a new review, or for editing the existing one"""
        self.session.require_identity("leave a review")
        self.form_mode = ReviewFormMode.EDIT if self.my_review else ReviewFormMode.CREATE
        return self.view()

    def cancel(self) -> ReviewSectionView:
        self.form_mode = ReviewFormMode.HIDDEN
        return self.view()

    async def submit(self, rating: int, comment: Optional[str] = None) -> ReviewSectionView:
        """
        Save the caller's review

        Updates the existing review when one was found on load, otherwise
        inserts a new row. The list is reloaded afterwards either way.
        """
        identity = self.session.require_identity("leave a review")
        rating = validate_rating(rating)
        comment = normalize_comment(comment)

        if self.my_review:
            await self.backend.update(
                REVIEWS_TABLE,
                {
                    "rating": rating,
                    "comment": comment,
                    "created_at": datetime.now(timezone.utc).isoformat(),
                },
                {"id": self.my_review.id},
            )
            logger.info(f"Review {self.my_review.id} updated by {identity.id}")
        else:
            await self.backend.insert(REVIEWS_TABLE, {
                "product_id": self.product_id,
                "user_id": identity.id,
                "rating": rating,
                "comment": comment,
            })
            logger.info(f"Review created on product {self.product_id} by {identity.id}")

        self.form_mode = ReviewFormMode.HIDDEN
        return await self.load()

    async def remove(self, confirmed: bool = False) -> ReviewSectionView:
        """Delete the caller's review"""
        self.session.require_identity("manage your review")
        if self.my_review is None:
            raise BadRequestException("You have not reviewed this product", "NO_REVIEW")
        if not confirmed:
            return self.view()

        await self.backend.delete(REVIEWS_TABLE, {"id": self.my_review.id})
        logger.info(f"Review {self.my_review.id} deleted")

        self.my_review = None
        self.draft_rating = DEFAULT_RATING
        self.draft_comment = ""
        self.form_mode = ReviewFormMode.HIDDEN
        return await self.load()

    def view(self) -> ReviewSectionView:
        items = [
            ReviewItem(
                id=review.id,
                rating=review.rating,
                comment=review.comment,
                reviewer_name=review.reviewer_name or "Anonymous",
                reviewer_initial=review.reviewer_initial,
                reviewed_on=format_short_date(review.created_at),
                is_mine=self.my_review is not None and same_id(review.id, self.my_review.id),
            )
            for review in self.reviews
        ]
        can_write = self.session.is_authenticated
        write_label = None
        if can_write:
            write_label = "Edit Your Review" if self.my_review else "Write a Review"
        return ReviewSectionView(
            product_id=self.product_id,
            reviews=items,
            review_count=len(items),
            my_review_id=self.my_review.id if self.my_review else None,
            can_write=can_write,
            write_label=write_label,
            form_mode=self.form_mode,
            draft_rating=self.draft_rating,
            draft_comment=self.draft_comment,
        )
