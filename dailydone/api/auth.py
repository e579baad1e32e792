"""Auth endpoints: login, register, verify, logout."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from dailydone.api.deps import get_auth_service, get_bearer_token
from dailydone.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    VerifyResponse,
)
from dailydone.services.auth import AuthService

router = APIRouter()


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT plus the sanitized user.
    Include the token in the Authorization header as: Bearer <token>
    """
    result = service.login(body.email, body.password)
    return AuthResponse(
        message="Login successful",
        token=result.token,
        user=result.user,
        redirect_url=result.redirect_url,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Create a user or helper account and sign it in."""
    result = service.register(
        username=body.username,
        email=body.email,
        password=body.password,
        name=body.name,
        role=body.role,
    )
    return AuthResponse(
        message="Registration successful",
        token=result.token,
        user=result.user,
        redirect_url=result.redirect_url,
    )


@router.get("/verify", response_model=VerifyResponse)
def verify(
    token: Annotated[str | None, Depends(get_bearer_token)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> VerifyResponse:
    return VerifyResponse(user=service.verify_token(token))


@router.post("/logout", response_model=MessageResponse)
def logout(
    token: Annotated[str | None, Depends(get_bearer_token)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    """Acknowledge logout. The token stays valid until it expires; clients must discard it."""
    service.logout(token)
    return MessageResponse(message="Logout successful")
