# =============================================================================
# core/models/review.py - Review Schemas
# =============================================================================
# A review is written by an authenticated user about one scholarship.
# The scholarship's name and university are copied onto the review when it
# is written, so later list views need no join.
# =============================================================================

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    """
    Schema for posting a review.

    Example:
        {
            "scholarshipId": "65f1c0ffee0000000000abcd",
            "rating": 5,
            "comment": "Clear requirements and fast response."
        }
    """

    scholarshipId: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(default="", max_length=2000)
    reviewerName: str | None = Field(default=None, max_length=255)
    reviewerImage: str | None = Field(default=None, max_length=2048)
