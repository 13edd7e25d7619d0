# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .user_service import UserService
from .scholarship_service import ScholarshipService, build_search_filter
from .application_service import ApplicationService
from .review_service import ReviewService

__all__ = [
    "UserService",
    "ScholarshipService",
    "build_search_filter",
    "ApplicationService",
    "ReviewService",
]
