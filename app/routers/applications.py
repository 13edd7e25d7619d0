# =============================================================================
# app/routers/applications.py - Application Lifecycle Endpoints
# =============================================================================
# Students pay and confirm; moderators review; admins see aggregate stats.
#
# Flow:
# 1. POST /application -> Stripe checkout URL (nothing stored yet)
# 2. Student pays on the hosted page and is redirected back
# 3. POST /application-success?session_id=... -> application created once
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.auth import Identity, require_admin, require_moderator, require_ownership, require_student
from app.dependencies import ApplicationServiceDep
from core.models.application import (
    ApplicationStatusUpdate,
    CheckoutRequest,
    CheckoutResponse,
    ConfirmationResponse,
)

router = APIRouter()


@router.post("/application", response_model=CheckoutResponse)
def start_checkout(
    identity: Annotated[Identity, Depends(require_student)],
    request: CheckoutRequest,
    applications: ApplicationServiceDep,
):
    """
    Start paying the application fee for a scholarship.

    Returns the hosted checkout URL to redirect the student to.
    """
    return applications.start_checkout(request, user_email=identity.email)


@router.post("/application-success", response_model=ConfirmationResponse)
def confirm_checkout(
    identity: Annotated[Identity, Depends(require_student)],
    session_id: Annotated[str, Query(min_length=1, description="Stripe checkout session id")],
    applications: ApplicationServiceDep,
):
    """
    Confirm a paid checkout session and create the application.

    Safe to call repeatedly: every call for the same session returns the
    same application id.
    """
    return applications.confirm_checkout(session_id, user_email=identity.email)


@router.get(
    "/applications/moderator",
    dependencies=[Depends(require_moderator)],
)
def list_all_applications(applications: ApplicationServiceDep):
    """Every application, newest first."""
    return applications.list_all()


@router.get(
    "/applications/application-status/stats",
    dependencies=[Depends(require_admin)],
)
def application_status_stats(applications: ApplicationServiceDep):
    """Application counts per status, e.g. {"pending": 2, "approved": 1}."""
    return applications.status_stats()


@router.get(
    "/applications",
    dependencies=[Depends(require_student), Depends(require_ownership("email"))],
)
def list_my_applications(
    email: Annotated[str, Query(description="Applicant email (must be the caller's)")],
    applications: ApplicationServiceDep,
):
    """The caller's own applications."""
    return applications.list_for_user(email)


@router.patch(
    "/applications/{application_id}",
    dependencies=[Depends(require_moderator)],
)
def update_application_status(
    application_id: Annotated[str, Path(description="Application id")],
    request: ApplicationStatusUpdate,
    applications: ApplicationServiceDep,
):
    """Set an application's review status."""
    return applications.set_status(application_id, request.applicationStatus)
