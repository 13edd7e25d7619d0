# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT issuing/verification and the request guard chain.
#
# Usage:
#   from app.auth import require_token, require_role, Identity
#
#   @router.get("/protected")
#   async def protected(identity: Identity = Depends(require_token)):
#       return {"email": identity.email}
# =============================================================================

from app.auth.dependencies import (
    OwnershipGuard,
    RoleGuard,
    require_admin,
    require_moderator,
    require_ownership,
    require_role,
    require_student,
    require_token,
)
from app.auth.models import Identity, TokenRequest, TokenResponse
from app.auth.tokens import issue_token, verify_token

__all__ = [
    "OwnershipGuard",
    "RoleGuard",
    "require_admin",
    "require_moderator",
    "require_ownership",
    "require_role",
    "require_student",
    "require_token",
    "Identity",
    "TokenRequest",
    "TokenResponse",
    "issue_token",
    "verify_token",
]
