# =============================================================================
# core/models/application.py - Application Schemas
# =============================================================================
# These models define the API contract for scholarship applications:
# - ApplicationStatus: moderator-controlled review state
# - CheckoutRequest: what a student submits to start paying the fees
# - CheckoutResponse: redirect URL for the hosted checkout page
# - ConfirmationResponse: result of confirming a paid checkout session
#
# Lifecycle:
#     NONE -> CHECKOUT_PENDING -> CONFIRMED  (application record created)
#                              \-> ABANDONED  (nothing is written)
#
# An application is materialized exactly once per payment transaction.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class ApplicationStatus(str, Enum):
    """
    Review state of an application.

    - pending: Created after payment, waiting for a moderator
    - processing: A moderator is reviewing it
    - approved: Accepted
    - rejected: Declined
    """
    PENDING = "pending"
    PROCESSING = "processing"
    APPROVED = "approved"
    REJECTED = "rejected"


class CheckoutRequest(BaseModel):
    """
    Schema for starting an application checkout.

    The user id/name come from the client profile; the email is always
    taken from the verified token.
    """

    scholarshipId: str = Field(..., min_length=1)
    userId: str | None = None
    userName: str | None = Field(default=None, max_length=255)
    applicationFees: float | None = Field(
        default=None,
        ge=0,
        description="Defaults to the scholarship's listed fee"
    )
    serviceCharge: float | None = Field(
        default=None,
        ge=0,
        description="Defaults to the scholarship's listed service charge"
    )


class CheckoutResponse(BaseModel):
    url: str
    sessionId: str


class ConfirmationResponse(BaseModel):
    """Identical for every retry of the same checkout session."""

    applicationId: str
    transactionId: str
    paymentStatus: str


class ApplicationStatusUpdate(BaseModel):
    applicationStatus: ApplicationStatus
