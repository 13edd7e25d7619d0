# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the ScholarStream API:
# - test_tokens.py: Token issuing/verification
# - test_guards.py: 401/403 behaviour of the guard chain
# - test_users.py, test_scholarships.py, test_applications.py,
#   test_reviews.py: Endpoint + service behaviour
# - test_models.py: Pydantic model validation
# - test_infrastructure.py: Store helpers, Stripe mapping, request ids
#
# Run tests with: poetry run pytest
# =============================================================================
