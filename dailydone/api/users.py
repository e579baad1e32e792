"""Profile update for the signed-in user and the admin user listing."""

from typing import Annotated

from fastapi import APIRouter, Depends

from dailydone.api.deps import get_auth_service, get_current_user
from dailydone.schemas.auth import ProfileResponse, UsersListResponse
from dailydone.schemas.user import ProfileUpdateRequest, UserRecord
from dailydone.services.auth import AuthService

router = APIRouter()


@router.patch("/me", response_model=ProfileResponse)
def update_me(
    body: ProfileUpdateRequest,
    current_user: Annotated[UserRecord, Depends(get_current_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> ProfileResponse:
    user = service.update_profile(
        current_user.id,
        name=body.name,
        email=body.email,
        completed_tasks=body.completed_tasks,
        money_saved=body.money_saved,
    )
    return ProfileResponse(message="Profile updated", user=user)


@router.get("", response_model=UsersListResponse)
def list_users(
    current_user: Annotated[UserRecord, Depends(get_current_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(users=service.list_users(current_user))
