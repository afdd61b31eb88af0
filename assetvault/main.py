"""FastAPI application for AssetVault.

This module provides the application factory with health endpoints,
API routes, and lifecycle management.

Run with:
    uvicorn assetvault.main:app --reload

Examples:
    >>> # Health check
    >>> curl http://localhost:8000/health

    >>> # Upload
    >>> curl -F file=@photo.png -H "m1as-user-id: alice" http://localhost:8000/api/v1/assets

Tests:
    - tests/unit/test_api.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from assetvault import __version__
from assetvault.api.v1 import router as v1_router
from assetvault.config import Settings, get_settings
from assetvault.container import build_services
from assetvault.core.errors import AssetError
from assetvault.logging_config import configure_logging

logger = logging.getLogger(__name__)


# Response models
class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class ReadyResponse(BaseModel):
    status: str
    repository: bool


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application and its service container.

    Args:
        settings: Explicit settings (tests); defaults to ``get_settings()``.
    """
    settings = settings or get_settings()
    services = build_services(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Configure logging, create tables, dispose connections on exit."""
        configure_logging(settings.LOGGER, settings.LOG_FILE, settings.LOG_LEVEL)
        logger.info(f"Starting AssetVault v{__version__}")
        await services.startup()

        yield

        logger.info("Shutting down AssetVault")
        await services.shutdown()

    app = FastAPI(
        title="AssetVault",
        description="Asset storage with private/public visibility and signed delivery links",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", settings.OWNER_HEADER],
    )

    app.include_router(v1_router)

    # Exception handlers
    @app.exception_handler(AssetError)
    async def asset_error_handler(request: Request, exc: AssetError):
        """Return domain errors as ``{"error", "code"}``."""
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {exc.code}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with consistent response format."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail, "code": f"HTTP_{exc.status_code}"},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed bodies and query parameters are client errors (400)."""
        fields = sorted({".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": f"Invalid request: {', '.join(fields) or 'body'}",
                "code": "BAD_REQUEST",
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception(f"Unexpected error: {exc}")

        if settings.DEBUG:
            detail = str(exc)
        else:
            detail = None

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "code": "INTERNAL_ERROR", "detail": detail},
        )

    # Health endpoints
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Liveness probe."""
        return HealthResponse(status="ok", version=__version__)

    @app.get("/ready", response_model=ReadyResponse, tags=["Health"])
    async def readiness_check():
        """Readiness probe: 503 when the metadata store is unreachable."""
        try:
            ready = await services.is_ready()
        except Exception as e:
            logger.error(f"Readiness check failed: {e}")
            ready = False

        if not ready:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unavailable", "repository": False},
            )
        return ReadyResponse(status="ok", repository=True)

    return app


app = create_app()


# Entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "assetvault.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().DEBUG,
    )
