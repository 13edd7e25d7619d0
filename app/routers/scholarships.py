# =============================================================================
# app/routers/scholarships.py - Scholarship Catalog Endpoints
# =============================================================================
# Listing and "latest" are public; reading a single listing needs a token;
# creating and deleting are admin-only.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.auth import require_admin, require_token
from app.dependencies import ScholarshipServiceDep
from core.models.scholarship import ScholarshipCreate, ScholarshipPage, ScholarshipQuery, SortOrder

router = APIRouter()


@router.post("/scholarship", dependencies=[Depends(require_admin)])
def create_scholarship(scholarship: ScholarshipCreate, scholarships: ScholarshipServiceDep):
    """Publish a new scholarship listing."""
    return {"insertedId": scholarships.create(scholarship)}


@router.get("/scholarship", response_model=ScholarshipPage)
def list_scholarships(
    scholarships: ScholarshipServiceDep,
    search: Annotated[str | None, Query(max_length=200, description="Matches name, university or degree")] = None,
    sort: Annotated[str, Query(pattern=r"^[A-Za-z_][A-Za-z0-9_.]{0,63}$", description="Field to sort by")] = "postDate",
    order: Annotated[SortOrder, Query(description="Sort direction")] = SortOrder.DESC,
    limit: Annotated[int, Query(ge=1, le=100, description="Page size")] = 10,
    skip: Annotated[int, Query(ge=0, description="Records to skip")] = 0,
):
    """
    Search, sort and paginate scholarships.

    Returns `{items, totalCount}`; totalCount is the size of the filtered
    set, independent of limit/skip.
    """
    query = ScholarshipQuery(search=search, sort=sort, order=order, limit=limit, skip=skip)
    return scholarships.list_scholarships(query)


@router.get("/latest-scholarship")
def latest_scholarships(
    scholarships: ScholarshipServiceDep,
    search: Annotated[str | None, Query(max_length=200)] = None,
):
    """The six most recently posted scholarships."""
    return scholarships.latest(search)


@router.get("/scholarship/{scholarship_id}", dependencies=[Depends(require_token)])
def get_scholarship(
    scholarship_id: Annotated[str, Path(description="Scholarship id")],
    scholarships: ScholarshipServiceDep,
):
    """Full scholarship details, including the description."""
    return scholarships.get(scholarship_id)


@router.delete("/scholarship/{scholarship_id}", dependencies=[Depends(require_admin)])
def delete_scholarship(
    scholarship_id: Annotated[str, Path(description="Scholarship id")],
    scholarships: ScholarshipServiceDep,
):
    scholarships.delete(scholarship_id)
    return {"deleted": True, "id": scholarship_id}
