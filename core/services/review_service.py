# =============================================================================
# core/services/review_service.py - Scholarship Reviews
# =============================================================================

import logging
from typing import Any

from pymongo import DESCENDING

from app.exceptions import ReviewNotFoundError, ScholarshipNotFoundError
from core.models.review import ReviewCreate
from lib.mongo_client import MongoStore, parse_object_id, serialize_documents
from lib.utils import normalize_email, utcnow

logger = logging.getLogger(__name__)


class ReviewService:
    """Service for creating, deleting and listing reviews."""

    def __init__(self, store: MongoStore):
        self._reviews = store.reviews
        self._scholarships = store.scholarships

    def create(self, review: ReviewCreate, reviewer_email: str) -> str:
        """
        Write a review, copying the scholarship's name and university onto it.

        The read and the write are not transactional: if the scholarship is
        deleted in between, the review keeps the names it was written with.
        """
        scholarship = self._scholarships.find_one(
            {"_id": parse_object_id(review.scholarshipId)},
            {"scholarshipName": 1, "universityName": 1},
        )
        if scholarship is None:
            raise ScholarshipNotFoundError(review.scholarshipId)

        document = review.model_dump()
        document.update(
            {
                "scholarshipName": scholarship.get("scholarshipName"),
                "universityName": scholarship.get("universityName"),
                "reviewerEmail": normalize_email(reviewer_email),
                "reviewDate": utcnow(),
            }
        )
        result = self._reviews.insert_one(document)
        logger.info(f"Review {result.inserted_id} added to scholarship {review.scholarshipId}")
        return str(result.inserted_id)

    def delete(self, review_id: str, reviewer_email: str) -> None:
        """Delete a review only if it was written by `reviewer_email`."""
        result = self._reviews.delete_one(
            {"_id": parse_object_id(review_id), "reviewerEmail": normalize_email(reviewer_email)}
        )
        if result.deleted_count == 0:
            raise ReviewNotFoundError(review_id)
        logger.info(f"Deleted review {review_id}")

    def list_by_email(self, email: str | None = None) -> list[dict[str, Any]]:
        query = {"reviewerEmail": normalize_email(email)} if email else {}
        return serialize_documents(self._reviews.find(query).sort("reviewDate", DESCENDING))

    def list_by_scholarship(self, scholarship_id: str) -> list[dict[str, Any]]:
        cursor = self._reviews.find({"scholarshipId": scholarship_id})
        return serialize_documents(cursor.sort("reviewDate", DESCENDING))
