# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - user.py: User roles and registration schemas
# - scholarship.py: Scholarship catalog schemas
# - application.py: Application checkout/confirmation schemas
# - review.py: Review schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .user import (
    UserCreate,
    UserResponse,
    UserRole,
    UserRoleUpdate,
)

from .scholarship import (
    LATEST_LIMIT,
    SEARCH_FIELDS,
    ScholarshipCreate,
    ScholarshipPage,
    ScholarshipQuery,
    SortOrder,
)

from .application import (
    ApplicationStatus,
    ApplicationStatusUpdate,
    CheckoutRequest,
    CheckoutResponse,
    ConfirmationResponse,
)

from .review import ReviewCreate

__all__ = [
    # User
    "UserCreate",
    "UserResponse",
    "UserRole",
    "UserRoleUpdate",
    # Scholarship
    "LATEST_LIMIT",
    "SEARCH_FIELDS",
    "ScholarshipCreate",
    "ScholarshipPage",
    "ScholarshipQuery",
    "SortOrder",
    # Application
    "ApplicationStatus",
    "ApplicationStatusUpdate",
    "CheckoutRequest",
    "CheckoutResponse",
    "ConfirmationResponse",
    # Review
    "ReviewCreate",
]
