# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================
# These models define the API contract for user operations:
# - UserRole: Enum for the three platform roles
# - UserCreate: Registration payload (role is never client-controlled)
# - UserRoleUpdate: Admin role change payload
# - UserResponse: User record returned to clients
#
# Users are keyed by email. Everyone starts as a student; only an admin
# can promote a user to moderator or admin.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    """
    Platform roles.

    - student: Applies to scholarships and writes reviews
    - moderator: Reviews applications and sets their status
    - admin: Manages scholarships and users
    """
    STUDENT = "student"
    MODERATOR = "moderator"
    ADMIN = "admin"


class UserCreate(BaseModel):
    """
    Schema for registering a user.

    Example:
        {
            "email": "ada@example.com",
            "name": "Ada Lovelace",
            "photoURL": "https://example.com/ada.png"
        }
    """
    email: EmailStr = Field(..., description="Unique login email")
    name: str | None = Field(default=None, max_length=255)
    photoURL: str | None = Field(default=None, max_length=2048)


class UserRoleUpdate(BaseModel):
    """Schema for an admin changing a user's role."""
    role: UserRole


class UserResponse(BaseModel):
    """User record as returned by the admin listing."""
    id: str = Field(..., alias="_id")
    email: str
    name: str | None = None
    photoURL: str | None = None
    role: UserRole = UserRole.STUDENT
    createdAt: datetime | None = None

    model_config = {"populate_by_name": True}
