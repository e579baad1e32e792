"""Liveness endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request

from dailydone.schemas.health import PingResponse

router = APIRouter()


@router.get("/ping", response_model=PingResponse)
def ping(request: Request) -> PingResponse:
    """Return the configured ping message and the server time. Used by load balancers."""
    return PingResponse(
        message=request.app.state.settings.PING_MESSAGE,
        timestamp=datetime.now(UTC),
    )
