"""FastAPI application entrypoint. No business logic; only wiring, middleware and error envelopes."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dailydone.api import router as api_router
from dailydone.core.config import Settings, get_settings
from dailydone.core.exceptions import AuthServiceError
from dailydone.repositories import UserRepository, build_user_repository
from dailydone.schemas.health import ErrorResponse
from dailydone.services.auth import AuthService

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _install_error_handlers(app: FastAPI, settings: Settings) -> None:
    show_details = settings.APP_ENV != "prod"

    @app.exception_handler(AuthServiceError)
    async def handle_auth_error(request: Request, exc: AuthServiceError) -> JSONResponse:
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        detail = "; ".join(str(err.get("msg", "")) for err in exc.errors())
        return _error(
            status.HTTP_400_BAD_REQUEST,
            "Invalid request body",
            detail if show_details else None,
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            str(exc) if show_details else None,
        )


def create_app(
    settings: Settings | None = None,
    repository: UserRepository | None = None,
) -> FastAPI:
    """
    Build the API app. The credential store is injectable; by default it is
    chosen by USER_STORE (in-memory list or SQL table).
    """
    settings = settings or get_settings()
    repository = repository or build_user_repository(settings)
    auth_service = AuthService(repository, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.SEED_DEMO_USERS:
            auth_service.seed_demo_users()
        logger.info(
            "DailyDone API started",
            extra={"app_env": settings.APP_ENV, "user_store": settings.USER_STORE},
        )
        yield

    app = FastAPI(
        title="DailyDone API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.auth_service = auth_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _install_error_handlers(app, settings)
    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


app = create_app()
