"""Shared FastAPI dependencies: the auth service and bearer-token resolution."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dailydone.schemas.user import UserRecord
from dailydone.services.auth import AuthService

security = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    """The AuthService built by create_app and stored on app.state."""
    return request.app.state.auth_service


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    return credentials.credentials if credentials is not None else None


def get_current_user(
    token: Annotated[str | None, Depends(get_bearer_token)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserRecord:
    """Dependency: 401 without a token, 403 for an invalid/expired one, 404 if the user is gone."""
    return service.authenticate(token)
