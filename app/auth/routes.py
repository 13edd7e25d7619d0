# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Issues access tokens. Sign-in itself happens client-side with the identity
# provider; the client then exchanges the signed-in email for an API token.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import require_token
from app.auth.models import Identity, TokenRequest, TokenResponse
from app.auth.tokens import issue_token
from app.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/getToken", response_model=TokenResponse)
async def get_token(request: TokenRequest) -> TokenResponse:
    """
    Issue a one-hour access token for the posted identity.

    Send it back as `Authorization: Bearer <token>`.
    """
    token = issue_token(request.email)
    logger.info(f"Issued token for {request.email}")
    return TokenResponse(token=token, expiresIn=settings.JWT_EXPIRES_MINUTES * 60)


@router.get("/auth/verify")
async def verify(identity: Identity = Depends(require_token)) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.
    """
    return {"valid": True, "email": identity.email}
