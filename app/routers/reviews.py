# =============================================================================
# app/routers/reviews.py - Review Endpoints
# =============================================================================
# Anyone can read reviews; any signed-in user can write one; only the
# student who wrote a review can delete it.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.auth import Identity, require_ownership, require_student, require_token
from app.dependencies import ReviewServiceDep
from core.models.review import ReviewCreate

router = APIRouter()


@router.post("/review")
def create_review(
    identity: Annotated[Identity, Depends(require_token)],
    review: ReviewCreate,
    reviews: ReviewServiceDep,
):
    """Post a review; the reviewer is always the token's identity."""
    return {"insertedId": reviews.create(review, reviewer_email=identity.email)}


@router.delete(
    "/review/{review_id}",
    dependencies=[Depends(require_student), Depends(require_ownership("email"))],
)
def delete_review(
    review_id: Annotated[str, Path(description="Review id")],
    email: Annotated[str, Query(description="Reviewer email (must be the caller's)")],
    reviews: ReviewServiceDep,
):
    reviews.delete(review_id, reviewer_email=email)
    return {"deleted": True, "id": review_id}


@router.get("/review")
def list_reviews(
    reviews: ReviewServiceDep,
    email: Annotated[str | None, Query(description="Only reviews by this email")] = None,
):
    return reviews.list_by_email(email)


@router.get("/review/{scholarship_id}")
def list_scholarship_reviews(
    scholarship_id: Annotated[str, Path(description="Scholarship id")],
    reviews: ReviewServiceDep,
):
    """Reviews for one scholarship."""
    return reviews.list_by_scholarship(scholarship_id)
