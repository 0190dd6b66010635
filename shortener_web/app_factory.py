"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortener.components import Components
from shortener.exceptions import ShortenerError
from .api import api_router
from .web import web_router
from .middleware.logging import LoggingMiddleware


logger = logging.getLogger("shortener.handler")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Map application errors to JSON responses.

    Client errors carry their message; server errors never leak details.
    """

    @app.exception_handler(ShortenerError)
    async def shortener_error_handler(request: Request, exc: ShortenerError):
        request_id = getattr(request.state, "request_id", None)
        if exc.status_code >= 500:
            logger.error(f"[{request_id}] {type(exc).__name__}: {exc.message}", exc_info=exc)
        else:
            logger.warning(f"[{request_id}] {type(exc).__name__}: {exc.message}")
        return _error(exc.status_code, exc.client_message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Malformed request body: {exc.errors()}")
        return _error(400, "Invalid request body.")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        request_id = getattr(request.state, "request_id", None)
        logger.critical(f"[{request_id}] An unexpected error occurred: {exc}", exc_info=exc)
        return _error(500, "Internal Server Error")


def create_app(components: Components, config) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        components: Store, services and remote log client
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener",
        description="Short links with expiry and click statistics",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Store instances in app state for access in routes
    app.state.config = config
    app.state.components = components
    app.state.store = components.store
    app.state.log_client = components.log_client
    app.state.shortcode_service = components.shortcode_service
    app.state.redirect_service = components.redirect_service
    app.state.stats_service = components.stats_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    # API first so /api/... never reaches the short code route
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Redirect"])

    return app
