"""API routes mounted under API_PREFIX."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from dailydone.api import auth, ping, users
from dailydone.schemas.health import ErrorResponse

router = APIRouter()
router.include_router(ping.router, tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])


# Registered last so every real route matches first.
@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
def api_not_found(path: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=ErrorResponse(message="API endpoint not found").model_dump(exclude_none=True),
    )
