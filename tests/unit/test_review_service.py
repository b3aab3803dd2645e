"""Unit tests for the review section."""

import pytest

from app.core.exceptions import BadRequestException, LoginRequiredException, ValidationException
from app.schemas.review import ReviewFormMode
from app.services.review_service import REVIEWS_TABLE, ReviewSection


@pytest.fixture
def product(backend):
    backend.seed("profiles", id="buyer-1", name="meera")
    backend.seed("profiles", id="other-1", name="Kiran")
    return backend.seed("products", id=21, name="Camera", price=8000, user_id="owner-1")


def reviews_for(backend, product_id=21):
    return [r for r in backend.rows(REVIEWS_TABLE) if str(r["product_id"]) == str(product_id)]


class TestReviewList:
    """Loading reviews."""

    @pytest.mark.asyncio
    async def test_newest_first_with_names(self, backend, session, product):
        backend.seed(REVIEWS_TABLE, product_id=21, user_id="other-1", rating=3,
                     created_at="2026-04-01T00:00:00+00:00")
        backend.seed(REVIEWS_TABLE, product_id=21, user_id="buyer-1", rating=5, comment="Sharp",
                     created_at="2026-04-05T00:00:00+00:00")
        backend.seed(REVIEWS_TABLE, product_id=99, user_id="other-1", rating=1)

        view = await ReviewSection(backend, session, 21).load()

        assert [item.reviewer_name for item in view.reviews] == ["meera", "Kiran"]
        assert view.reviews[0].reviewer_initial == "M"
        assert view.reviews[0].reviewed_on == "5/4/2026"
        assert view.review_count == 2

    @pytest.mark.asyncio
    async def test_unknown_reviewer(self, backend, session, product):
        backend.seed(REVIEWS_TABLE, product_id=21, user_id="ghost", rating=4)

        view = await ReviewSection(backend, session, 21).load()

        assert view.reviews[0].reviewer_name == "Anonymous"
        assert view.reviews[0].reviewer_initial == "?"

    @pytest.mark.asyncio
    async def test_anonymous_cannot_write(self, backend, session, product):
        view = await ReviewSection(backend, session, 21).load()
        assert view.can_write is False
        assert view.write_label is None

    @pytest.mark.asyncio
    async def test_finds_callers_review(self, backend, buyer_session, product):
        backend.seed(REVIEWS_TABLE, product_id=21, user_id="other-1", rating=3)
        mine = backend.seed(REVIEWS_TABLE, product_id=21, user_id="buyer-1", rating=2, comment="Meh")

        view = await ReviewSection(backend, buyer_session, 21).load()

        assert view.my_review_id == mine["id"]
        assert view.write_label == "Edit Your Review"
        assert (view.draft_rating, view.draft_comment) == (2, "Meh")
        assert [item.is_mine for item in view.reviews].count(True) == 1


class TestReviewForm:
    """Opening and cancelling the form."""

    @pytest.mark.asyncio
    async def test_open_requires_login(self, backend, session, product):
        section = ReviewSection(backend, session, 21)
        await section.load()
        with pytest.raises(LoginRequiredException):
            section.open_form()

    @pytest.mark.asyncio
    async def test_create_then_edit_modes(self, backend, buyer_session, product):
        section = ReviewSection(backend, buyer_session, 21)
        await section.load()
        assert section.open_form().form_mode == ReviewFormMode.CREATE

        await section.submit(4, "Nice")
        assert section.view().form_mode == ReviewFormMode.HIDDEN
        assert section.open_form().form_mode == ReviewFormMode.EDIT
        assert section.cancel().form_mode == ReviewFormMode.HIDDEN


class TestReviewSubmit:
    """One review per identity and product."""

    @pytest.mark.asyncio
    async def test_first_submit_creates_row(self, backend, buyer_session, product):
        section = ReviewSection(backend, buyer_session, 21)
        await section.load()

        view = await section.submit(4, "  Good value  ")

        rows = reviews_for(backend)
        assert len(rows) == 1
        assert (rows[0]["user_id"], rows[0]["rating"], rows[0]["comment"]) == ("buyer-1", 4, "Good value")
        assert view.review_count == 1

    @pytest.mark.asyncio
    async def test_second_submit_updates_same_row(self, backend, buyer_session, product):
        """Rating 4 then rating 2 leaves a single row with rating 2."""
        section = ReviewSection(backend, buyer_session, 21)
        await section.load()
        await section.submit(4)
        first_id = reviews_for(backend)[0]["id"]

        view = await section.submit(2)

        rows = reviews_for(backend)
        assert len(rows) == 1
        assert rows[0]["id"] == first_id
        assert rows[0]["rating"] == 2
        assert view.review_count == 1

    @pytest.mark.asyncio
    async def test_fresh_section_still_updates(self, backend, buyer_session, product):
        """A new view-model finds the existing review on load."""
        backend.seed(REVIEWS_TABLE, product_id=21, user_id="buyer-1", rating=5)
        section = ReviewSection(backend, buyer_session, 21)
        await section.load()

        await section.submit(1, "")

        rows = reviews_for(backend)
        assert len(rows) == 1
        assert rows[0]["rating"] == 1
        assert rows[0]["comment"] is None

    @pytest.mark.asyncio
    async def test_update_refreshes_timestamp(self, backend, buyer_session, product):
        backend.seed(REVIEWS_TABLE, product_id=21, user_id="buyer-1", rating=5,
                     created_at="2020-01-01T00:00:00+00:00")
        section = ReviewSection(backend, buyer_session, 21)
        await section.load()

        await section.submit(3)

        assert reviews_for(backend)[0]["created_at"] > "2020-01-01T00:00:00+00:00"

    @pytest.mark.asyncio
    async def test_invalid_rating(self, backend, buyer_session, product):
        section = ReviewSection(backend, buyer_session, 21)
        await section.load()
        with pytest.raises(ValidationException):
            await section.submit(6)
        assert reviews_for(backend) == []

    @pytest.mark.asyncio
    async def test_submit_requires_login(self, backend, session, product):
        section = ReviewSection(backend, session, 21)
        await section.load()
        with pytest.raises(LoginRequiredException):
            await section.submit(5)


class TestReviewRemove:
    """Deleting the caller's review."""

    @pytest.mark.asyncio
    async def test_remove_deletes_and_resets(self, backend, buyer_session, product):
        backend.seed(REVIEWS_TABLE, product_id=21, user_id="buyer-1", rating=2, comment="Meh")
        backend.seed(REVIEWS_TABLE, product_id=21, user_id="other-1", rating=4)
        section = ReviewSection(backend, buyer_session, 21)
        await section.load()

        view = await section.remove(confirmed=True)

        assert [r["user_id"] for r in reviews_for(backend)] == ["other-1"]
        assert view.my_review_id is None
        assert (view.draft_rating, view.draft_comment) == (5, "")
        assert view.write_label == "Write a Review"

    @pytest.mark.asyncio
    async def test_unconfirmed_remove_keeps_review(self, backend, buyer_session, product):
        backend.seed(REVIEWS_TABLE, product_id=21, user_id="buyer-1", rating=2)
        section = ReviewSection(backend, buyer_session, 21)
        await section.load()

        await section.remove(confirmed=False)

        assert len(reviews_for(backend)) == 1

    @pytest.mark.asyncio
    async def test_remove_without_review(self, backend, buyer_session, product):
        section = ReviewSection(backend, buyer_session, 21)
        await section.load()
        with pytest.raises(BadRequestException) as exc:
            await section.remove(confirmed=True)
        assert exc.value.error_code == "NO_REVIEW"
