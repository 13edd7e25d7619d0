# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from pydantic import BaseModel, ConfigDict, EmailStr


class Identity(BaseModel):
    """
    Verified caller identity extracted from an access token.

    `email` is the one canonical identity field: every ownership check
    compares against it.
    """
    email: str

    model_config = ConfigDict(frozen=True)


class TokenRequest(BaseModel):
    """Identity posted to POST /getToken."""
    email: EmailStr


class TokenResponse(BaseModel):
    token: str
    expiresIn: int


class TokenPayload(BaseModel):
    """Decoded JWT claims."""
    email: str
    iat: int
    exp: int
