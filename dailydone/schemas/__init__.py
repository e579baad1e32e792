"""Pydantic request/response schemas."""

from dailydone.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    TokenClaims,
    UsersListResponse,
    VerifyResponse,
)
from dailydone.schemas.health import ErrorResponse, PingResponse
from dailydone.schemas.user import (
    SELF_ASSIGNABLE_ROLES,
    NewUser,
    ProfileUpdateRequest,
    Role,
    UserPublic,
    UserRecord,
)

__all__ = [
    "AuthResponse",
    "ErrorResponse",
    "LoginRequest",
    "MessageResponse",
    "NewUser",
    "PingResponse",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "Role",
    "SELF_ASSIGNABLE_ROLES",
    "TokenClaims",
    "UserPublic",
    "UserRecord",
    "UsersListResponse",
    "VerifyResponse",
]
