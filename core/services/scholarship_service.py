# =============================================================================
# core/services/scholarship_service.py - Scholarship Catalog
# =============================================================================
# CRUD plus search/sort/paginate over the `scholarships` collection.
#
# Search is a case-insensitive substring match over name, university and
# degree (OR). List views drop the long `description` field.
# =============================================================================

import logging
import re
from typing import Any

from pymongo import ASCENDING, DESCENDING

from app.exceptions import ScholarshipNotFoundError
from core.models.scholarship import (
    LATEST_LIMIT,
    SEARCH_FIELDS,
    ScholarshipCreate,
    ScholarshipPage,
    ScholarshipQuery,
    SortOrder,
)
from lib.mongo_client import MongoStore, parse_object_id, serialize_document, serialize_documents
from lib.utils import utcnow

logger = logging.getLogger(__name__)

LIST_PROJECTION = {"description": 0}


def build_search_filter(search: str | None) -> dict[str, Any]:
    """
    Build the OR-of-regex filter for a free-text search.

    User input is escaped so "C++" or "M.Sc" match literally.

    Example:
        build_search_filter("eng")
        # {"$or": [{"scholarshipName": {"$regex": "eng", "$options": "i"}}, ...]}
    """
    term = (search or "").strip()
    if not term:
        return {}
    pattern = re.escape(term)
    return {
        "$or": [
            {field: {"$regex": pattern, "$options": "i"}}
            for field in SEARCH_FIELDS
        ]
    }


class ScholarshipService:
    """Service for the scholarship catalog."""

    def __init__(self, store: MongoStore):
        self._scholarships = store.scholarships

    def create(self, scholarship: ScholarshipCreate) -> str:
        document = scholarship.model_dump()
        if document.get("postDate") is None:
            document["postDate"] = utcnow()

        result = self._scholarships.insert_one(document)
        logger.info(f"Created scholarship {result.inserted_id}: {scholarship.scholarshipName}")
        return str(result.inserted_id)

    def list_scholarships(self, query: ScholarshipQuery) -> ScholarshipPage:
        """
        List scholarships with search, sort and pagination.

        totalCount reflects the whole filtered set, not just this page.
        Ties on the sort field are broken by _id so pages are stable.
        """
        filters = build_search_filter(query.search)
        direction = ASCENDING if query.order == SortOrder.ASC else DESCENDING

        cursor = (
            self._scholarships.find(filters, LIST_PROJECTION)
            .sort([(query.sort, direction), ("_id", direction)])
            .skip(query.skip)
            .limit(query.limit)
        )
        items = serialize_documents(cursor)
        total = self._scholarships.count_documents(filters)

        logger.debug(f"Listed {len(items)} of {total} scholarships (search={query.search!r})")
        return ScholarshipPage(items=items, totalCount=total)

    def latest(self, search: str | None = None) -> list[dict[str, Any]]:
        cursor = (
            self._scholarships.find(build_search_filter(search), LIST_PROJECTION)
            .sort([("postDate", DESCENDING), ("_id", DESCENDING)])
            .limit(LATEST_LIMIT)
        )
        return serialize_documents(cursor)

    def get(self, scholarship_id: str) -> dict[str, Any]:
        scholarship = self._scholarships.find_one({"_id": parse_object_id(scholarship_id)})
        if scholarship is None:
            raise ScholarshipNotFoundError(scholarship_id)
        return serialize_document(scholarship)

    def delete(self, scholarship_id: str) -> None:
        result = self._scholarships.delete_one({"_id": parse_object_id(scholarship_id)})
        if result.deleted_count == 0:
            raise ScholarshipNotFoundError(scholarship_id)
        logger.info(f"Deleted scholarship {scholarship_id}")
