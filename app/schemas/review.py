"""Review schemas"""

from pydantic import Field
from typing import Any, Dict, List, Optional
from datetime import datetime
from enum import Enum

from .base import BaseSchema, RecordId

class ReviewFormMode(str, Enum):
    """Which review form, if any, is on screen"""
    HIDDEN = "hidden"
    CREATE = "create"
    EDIT = "edit"

class Review(BaseSchema):
    """Review row joined with the reviewer's name"""
    id: RecordId
    product_id: RecordId
    user_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    reviewer_name: Optional[str] = None

    @property
    def reviewer_initial(self) -> str:
        if self.reviewer_name:
            return self.reviewer_name[0].upper()
        return "?"

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Review":
        profile = row.get("profiles") or {}
        return cls(
            id=row["id"],
            product_id=row["product_id"],
            user_id=str(row["user_id"]),
            rating=row["rating"],
            comment=row.get("comment"),
            created_at=row.get("created_at"),
            reviewer_name=profile.get("name"),
        )

class ReviewSubmit(BaseSchema):
    """Review form submission"""
    rating: int = 5
    comment: Optional[str] = None

class ReviewItem(BaseSchema):
    """Review as rendered in the list"""
    id: RecordId
    rating: int
    comment: Optional[str] = None
    reviewer_name: str
    reviewer_initial: str
    reviewed_on: Optional[str] = None
    is_mine: bool = False

class ReviewSectionView(BaseSchema):
    """State of the review section under a product"""
    product_id: RecordId
    reviews: List[ReviewItem] = []
    review_count: int = 0
    my_review_id: Optional[RecordId] = None
    can_write: bool = False
    write_label: Optional[str] = None
    form_mode: ReviewFormMode = ReviewFormMode.HIDDEN
    draft_rating: int = 5
    draft_comment: str = ""
