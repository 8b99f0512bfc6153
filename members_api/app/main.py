"""
Main entrypoint for the Members API.

This module assembles the FastAPI application, sets up logging,
installs the error envelope handlers and mounts the API router under
``/api``.  ``create_app`` builds and configures the app, which is then
instantiated at module import time as ``app`` so it can be served
directly, e.g.::

    uvicorn members_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Callable, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.router import router as api_router
from .core.config import Settings, settings as default_settings
from .core.db import StorageGateway, init_db
from .core.errors import MemberServiceError
from .core.logging_config import setup_logging
from .services.member_service import MemberService, utc_today

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the ``{"success": false, "error": ...}`` envelope."""
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def install_exception_handlers(app: FastAPI) -> None:
    """Register handlers so that every failure uses the error envelope."""

    @app.exception_handler(MemberServiceError)
    async def _handle_service_error(_request: Request, exc: MemberServiceError) -> JSONResponse:
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _handle_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Rejected request body: %s", exc.errors())
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_error(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[StorageGateway] = None,
    clock: Optional[Callable[[], date]] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Settings to use instead of the module-level ``settings``.
    gateway : Optional[StorageGateway]
        Storage gateway for the member service.  Defaults to one bound
        to ``settings.database_url``.
    clock : Optional[Callable[[], date]]
        Source of the current date for new members.  Defaults to
        ``utc_today``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that startup can log.
    setup_logging(settings.log_level, settings.log_file)

    if gateway is None:
        gateway = StorageGateway(settings.database_url)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        # Create the database file if needed and bring the schema up to date.
        init_db(gateway.db_url)
        logger.info("Database ready")
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.member_service = MemberService(gateway, clock or utc_today)

    install_exception_handlers(app)
    app.include_router(api_router, prefix="/api")
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
