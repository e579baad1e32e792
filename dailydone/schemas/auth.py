"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from dailydone.schemas.user import Role, UserPublic


class TokenClaims(BaseModel):
    """Claims payload embedded in a session token."""

    user_id: str = Field(..., min_length=1)
    email: str
    role: Role
    expires_at: datetime | None = None


class LoginRequest(BaseModel):
    """
    Credentials for login.

    Fields are optional at the schema level so an absent field is reported as
    missing by the auth service rather than as a generic validation error.
    """

    email: str | None = Field(default=None, description="Account email (case-insensitive)")
    password: str | None = Field(default=None, description="Password")


class RegisterRequest(BaseModel):
    """Public registration. role is limited to 'user' or 'helper'."""

    username: str | None = Field(default=None, description="3-20 chars: letters, digits, underscore")
    email: str | None = None
    password: str | None = Field(default=None, description="At least 8 characters")
    name: str | None = Field(default=None, description="Display name")
    role: str | None = Field(default=None, description="'user' (default) or 'helper'")


class AuthResponse(BaseModel):
    """Returned by login and register."""

    success: bool = True
    message: str
    token: str
    user: UserPublic
    redirect_url: str


class VerifyResponse(BaseModel):
    success: bool = True
    user: UserPublic
    valid: bool = True


class MessageResponse(BaseModel):
    success: bool = True
    message: str | None = None


class ProfileResponse(BaseModel):
    success: bool = True
    message: str | None = None
    user: UserPublic


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    success: bool = True
    users: list[UserPublic]
