from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING, cast

import structlog
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, PlainTextResponse, Response

from directory.representations import NotAcceptableError
from directory.server.middleware import RequestContextMiddleware, SlashNormalizationMiddleware
from directory.server.routes import build_routes
from directory.server.settings import DirectoryServerSettings
from directory.views.user_handlers import InvalidBodyError, create_templates
from shared.logging import setup_logging
from shared.users import (
    InMemoryUserRepository,
    InvalidUserError,
    UserDirectoryError,
    UserPayload,
)

logger = structlog.get_logger()

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.users import UserRepository


async def _http_error_handler(_request: Request, exc: Exception) -> Response:
    """Render HTTP errors as plain text with the status phrase as the default detail."""
    http_exc = cast("HTTPException", exc)
    if http_exc.status_code in {HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED}:
        return Response(status_code=http_exc.status_code, headers=http_exc.headers)
    return PlainTextResponse(http_exc.detail or "", status_code=http_exc.status_code, headers=http_exc.headers)


async def _not_acceptable_handler(_request: Request, exc: Exception) -> Response:
    return PlainTextResponse(str(exc), status_code=HTTPStatus.NOT_ACCEPTABLE)


async def _invalid_body_handler(_request: Request, exc: Exception) -> Response:
    return JSONResponse({"error": str(exc)}, status_code=HTTPStatus.UNPROCESSABLE_ENTITY)


async def _directory_error_handler(_request: Request, exc: Exception) -> Response:
    """Map rejected create/update calls (strict mode only) to 409/422."""
    status = HTTPStatus.UNPROCESSABLE_ENTITY if isinstance(exc, InvalidUserError) else HTTPStatus.CONFLICT
    logger.info("user operation rejected", error=type(exc).__name__, detail=str(exc))
    return JSONResponse({"error": str(exc)}, status_code=status)


def build_repository(settings: DirectoryServerSettings) -> InMemoryUserRepository:
    """Create the process-wide repository, seeding the admin account when enabled."""
    repository = InMemoryUserRepository(strict=settings.strict_mode)
    if settings.seed_admin:
        repository.create(UserPayload(username=settings.admin_username, password=settings.admin_password))
    return repository


def create_app(
    settings: DirectoryServerSettings | None = None,
    repository: UserRepository | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = DirectoryServerSettings()
    if repository is None:
        repository = build_repository(settings)

    app = Starlette(
        routes=build_routes(),
        exception_handlers={
            HTTPException: _http_error_handler,
            NotAcceptableError: _not_acceptable_handler,
            InvalidBodyError: _invalid_body_handler,
            UserDirectoryError: _directory_error_handler,
        },
    )
    app.add_middleware(SlashNormalizationMiddleware)  # type: ignore[arg-type]
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,  # type: ignore[arg-type]
            allow_origins=settings.cors_origins,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["Accept", "Content-Type", "X-Request-ID"],
        )
    app.add_middleware(RequestContextMiddleware)  # type: ignore[arg-type]

    app.state.settings = settings
    app.state.repository = repository
    app.state.templates = create_templates()

    logger.info("user directory ready", users=repository.count(), strict_mode=settings.strict_mode)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory directory.server.app:get_app."""
    settings = DirectoryServerSettings()
    setup_logging(log_dir=settings.log_dir)
    return create_app(settings=settings)
