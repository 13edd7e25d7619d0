# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for data validation
# - services/: Users, scholarships, applications and reviews over MongoDB
#
# Code in this package should NOT import from FastAPI.
# Services receive their MongoStore (and payment gateway) explicitly.
# =============================================================================
