# =============================================================================
# app/auth/tokens.py - Access Token Service
# =============================================================================
# Issues and verifies the HS256 bearer tokens used by the API.
#
# Tokens are stateless: validity depends only on the signature and the
# `exp` claim at verification time. Nothing is stored server-side.
#
# Usage:
#   token = issue_token("ada@example.com")
#   identity = verify_token(token)   # Identity(email="ada@example.com")
# =============================================================================

import logging
from datetime import timedelta

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

from app.auth.models import Identity, TokenPayload
from app.config import settings
from app.exceptions import UnauthenticatedError
from lib.utils import normalize_email, utcnow

logger = logging.getLogger(__name__)


def issue_token(
    email: str,
    secret: str | None = None,
    expires_in: timedelta | None = None,
) -> str:
    """
    Sign an access token carrying the caller's email.

    Args:
        email: Identity claim
        secret: Signing secret (defaults to JWT_SECRET)
        expires_in: Lifetime (defaults to JWT_EXPIRES_MINUTES, one hour)

    Returns:
        Encoded JWT string
    """
    issued_at = utcnow()
    lifetime = expires_in or timedelta(minutes=settings.JWT_EXPIRES_MINUTES)
    claims = {
        "email": normalize_email(email),
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str | None, secret: str | None = None) -> Identity:
    """
    Verify a token and return the identity it carries.

    Raises:
        UnauthenticatedError: empty, malformed, tampered or expired token,
            or a token without an email claim
    """
    if not token:
        raise UnauthenticatedError("Missing bearer token")

    try:
        claims = jwt.decode(
            token,
            secret or settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise UnauthenticatedError("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise UnauthenticatedError("Invalid token")

    try:
        payload = TokenPayload(**claims)
    except ValidationError:
        logger.warning("JWT token missing required claims")
        raise UnauthenticatedError("Invalid token: missing identity claim")

    email = normalize_email(payload.email)
    if not email:
        raise UnauthenticatedError("Invalid token: missing identity claim")
    return Identity(email=email)
