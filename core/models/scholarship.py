# =============================================================================
# core/models/scholarship.py - Scholarship Schemas
# =============================================================================
# These models define the API contract for the scholarship catalog:
# - ScholarshipCreate: Admin payload for a new listing
# - ScholarshipQuery: search/sort/paginate parameters for the public list
# - ScholarshipPage: {items, totalCount} list response
#
# Listings are public. The list views never include `description`.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

# Fields matched by the free-text search (OR semantics)
SEARCH_FIELDS = ("scholarshipName", "universityName", "degree")

# Number of listings returned by the "latest" view
LATEST_LIMIT = 6


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ScholarshipCreate(BaseModel):
    """
    Schema for creating a scholarship listing.

    Example:
        {
            "scholarshipName": "Global Excellence Award",
            "universityName": "Engineering Institute",
            "degree": "Masters",
            "scholarshipCategory": "Full fund",
            "applicationFees": 50,
            "serviceCharge": 10
        }
    """

    scholarshipName: str = Field(..., min_length=1, max_length=255)
    universityName: str = Field(..., min_length=1, max_length=255)
    universityImage: str | None = None
    universityCountry: str | None = None
    universityCity: str | None = None
    universityWorldRank: int | None = Field(default=None, ge=1)
    subjectCategory: str | None = None
    scholarshipCategory: str | None = None
    degree: str = Field(..., min_length=1, max_length=100)
    tuitionFees: float | None = Field(default=None, ge=0)
    applicationFees: float = Field(default=0, ge=0)
    serviceCharge: float = Field(default=0, ge=0)
    applicationDeadline: datetime | None = None
    postDate: datetime | None = Field(
        default=None,
        description="Defaults to the creation time when omitted"
    )
    postedUserEmail: str | None = None
    description: str | None = None


class ScholarshipQuery(BaseModel):
    """Parameters for listing scholarships."""

    search: str | None = Field(default=None, max_length=200)
    sort: str = Field(default="postDate", pattern=r"^[A-Za-z_][A-Za-z0-9_.]{0,63}$")
    order: SortOrder = SortOrder.DESC
    limit: int = Field(default=10, ge=1, le=100)
    skip: int = Field(default=0, ge=0)


class ScholarshipPage(BaseModel):
    """Paginated scholarship list."""

    items: list[dict[str, Any]] = Field(default_factory=list)
    totalCount: int = Field(default=0, ge=0)
