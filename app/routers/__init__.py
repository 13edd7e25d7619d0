# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - users.py: Registration, role lookup and admin user management
# - scholarships.py: Scholarship catalog
# - applications.py: Checkout, confirmation and moderation of applications
# - reviews.py: Scholarship reviews
#
# Each router is mounted in main.py.
# =============================================================================

from . import health
from . import users
from . import scholarships
from . import applications
from . import reviews

__all__ = [
    "health",
    "users",
    "scholarships",
    "applications",
    "reviews",
]
