# =============================================================================
# app/routers/users.py - User Endpoints
# =============================================================================
# Registration is public; role lookups need a token; listing, role changes
# and deletion are admin-only.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel

from app.auth import require_admin, require_student, require_token
from app.dependencies import UserServiceDep
from app.exceptions import UserNotFoundError
from core.models.user import UserCreate, UserResponse, UserRole, UserRoleUpdate

router = APIRouter()


class UserCreateResponse(BaseModel):
    """Same shape for new and existing users; insertedId is null for the latter."""
    message: str
    insertedId: str | None = None


@router.post("/users", response_model=UserCreateResponse)
def register_user(user: UserCreate, users: UserServiceDep):
    """
    Register a user on first sign-in.

    New users are always students. Registering an existing email is not an
    error: the response says so and nothing is written.
    """
    inserted_id, created = users.register(user)
    if not created:
        return UserCreateResponse(message="user already exists", insertedId=None)
    return UserCreateResponse(message="user created", insertedId=inserted_id)


@router.get("/users/{email}/role", dependencies=[Depends(require_token)])
def get_user_role(
    email: Annotated[str, Path(description="User email")],
    users: UserServiceDep,
):
    """Return the stored role for an email."""
    role = users.get_role(email)
    if role is None:
        raise UserNotFoundError(email)
    return {"role": role.value}


@router.get("/users/{email}/id", dependencies=[Depends(require_student)])
def get_user_id(
    email: Annotated[str, Path(description="User email")],
    users: UserServiceDep,
):
    """Return the user id for an email (used when starting a checkout)."""
    return {"id": users.get_id(email)}


@router.get(
    "/users",
    response_model=list[UserResponse],
    dependencies=[Depends(require_admin)],
)
def list_users(
    users: UserServiceDep,
    role: Annotated[UserRole | None, Query(description="Filter by role")] = None,
):
    """List all users, newest first."""
    return users.list_users(role)


@router.patch(
    "/users/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(require_admin)],
)
def update_user_role(
    user_id: Annotated[str, Path(description="User id")],
    request: UserRoleUpdate,
    users: UserServiceDep,
):
    """Change a user's role."""
    return users.set_role(user_id, request.role)


@router.delete("/users/{user_id}", dependencies=[Depends(require_admin)])
def delete_user(
    user_id: Annotated[str, Path(description="User id")],
    users: UserServiceDep,
):
    users.delete(user_id)
    return {"deleted": True, "id": user_id}
