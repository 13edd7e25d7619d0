# =============================================================================
# app/auth/dependencies.py - Authorization Guards
# =============================================================================
# Request guards implemented as FastAPI dependencies:
#
# 1. require_token            -> 401 unless a valid bearer token is sent
# 2. require_role(*roles)     -> 403 unless the caller's stored role matches
# 3. require_ownership(param) -> 403 unless the request's email is the caller's
#
# require_role and require_ownership both depend on require_token, so the
# token is always checked first and verified once per request. A route lists
# its guards in order and the first failure stops the request before the
# handler (and any database write) runs.
#
# Usage:
#   @router.delete(
#       "/review/{review_id}",
#       dependencies=[Depends(require_role(UserRole.STUDENT)),
#                     Depends(require_ownership("email"))],
#   )
# =============================================================================

import logging
from typing import Literal

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.auth.models import Identity
from app.auth.tokens import verify_token
from app.dependencies import get_user_service
from app.exceptions import ForbiddenError, UnauthenticatedError
from core.models.user import UserRole
from core.services.user_service import UserService
from lib.utils import normalize_email

logger = logging.getLogger(__name__)

# auto_error=False: a missing header must be a 401 from us, not the 403
# older FastAPI releases send
bearer_scheme = HTTPBearer(auto_error=False)


async def require_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity:
    """
    Verify the bearer token and return the caller's identity.

    Raises:
        UnauthenticatedError: 401 if the header is missing or the token is
            malformed, tampered with or expired
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Missing bearer token")

    identity = verify_token(credentials.credentials)
    logger.debug(f"Authenticated {identity.email}")
    return identity


class RoleGuard:
    """
    Dependency that admits only callers whose stored role is in `roles`.

    The identity lookup goes through UserService (injected, so tests can
    override it) and is a single query.
    """

    def __init__(self, *roles: UserRole):
        self.roles = frozenset(roles)

    def __call__(
        self,
        identity: Identity = Depends(require_token),
        users: UserService = Depends(get_user_service),
    ) -> Identity:
        role = users.get_role(identity.email)
        if role is None or role not in self.roles:
            logger.info(f"Role check failed for {identity.email}: has {role}, needs {sorted(r.value for r in self.roles)}")
            raise ForbiddenError(
                "Forbidden access",
                details={"required_roles": sorted(r.value for r in self.roles)},
            )
        return identity


class OwnershipGuard:
    """
    Dependency that admits only callers acting on their own email.

    Compares the verified identity against a query or path parameter.
    """

    def __init__(self, param: str, source: Literal["query", "path"] = "query"):
        self.param = param
        self.source = source

    async def __call__(
        self,
        request: Request,
        identity: Identity = Depends(require_token),
    ) -> Identity:
        params = request.query_params if self.source == "query" else request.path_params
        claimed = normalize_email(params.get(self.param))
        if not claimed or claimed != identity.email:
            logger.info(f"Ownership check failed: token={identity.email} requested={claimed or None}")
            raise ForbiddenError(
                "Forbidden access",
                details={"param": self.param},
            )
        return identity


def require_role(*roles: UserRole) -> RoleGuard:
    return RoleGuard(*roles)


def require_ownership(param: str, source: Literal["query", "path"] = "query") -> OwnershipGuard:
    return OwnershipGuard(param, source)


# Shared guard instances for the common single-role routes
require_student = require_role(UserRole.STUDENT)
require_moderator = require_role(UserRole.MODERATOR)
require_admin = require_role(UserRole.ADMIN)
