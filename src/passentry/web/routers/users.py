from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, EmailStr, Field

from passentry.core.modules.user.models import UserView
from passentry.web.deps import AppDep, AuthTokenDep
from passentry.web.openapi import ErrorResponse

router = APIRouter(tags=["users"])


class CreateUserRequest(BaseModel):
    """User creation request."""

    email: EmailStr = Field(..., description="Email address entry links are sent to")
    display_name: str = Field(..., min_length=1, description="Name used in greetings")


@router.get(
    "/users",
    summary="List all users",
    description="Get all users in the directory.",
    operation_id="listUsers",
    responses={
        200: {"description": "List of users"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_users(app: AppDep, auth_token: AuthTokenDep) -> list[UserView]:
    return await app.get_all_users(auth_token)


@router.post(
    "/users",
    summary="Create user",
    description="Add a user who can then sign in with an entry link.",
    operation_id="createUser",
    status_code=201,
    responses={
        201: {"description": "User created"},
        400: {"model": ErrorResponse, "description": "Invalid data or email already registered"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_user(request: CreateUserRequest, app: AppDep, auth_token: AuthTokenDep) -> UserView:
    return await app.create_user(auth_token, request.email, request.display_name)


@router.delete(
    "/users/{user_id}",
    summary="Delete user",
    description="Remove a user and end their sessions.",
    operation_id="deleteUser",
    status_code=204,
    responses={
        204: {"description": "User deleted"},
        400: {"model": ErrorResponse, "description": "Cannot delete yourself"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def delete_user(user_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_user(auth_token, user_id)
