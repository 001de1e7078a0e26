"""
FastAPI application entry point for the DailyPulse backend.

This module initializes the FastAPI application with:
- CORS middleware for the dashboard frontend
- Rate limiting (slowapi)
- Exception handlers for consistent error responses
- Startup checks for push and token configuration
- Logging configuration

Environment Variables:
    DAILYPULSE_DB_URL: Database URL (default: sqlite:///./dailypulse.db)
    DAILYPULSE_ENV: Environment (production/development, default: development)
    DAILYPULSE_LOG_LEVEL: Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL, default: INFO)
    DAILYPULSE_CORS_ORIGINS: Comma-separated allowed origins (default: localhost:3000)
    See backend.src.config.settings for notification and token settings.
"""

import os
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from backend.src.config.settings import get_settings
from backend.src.services.exceptions import ServiceError
from backend.src.utils.logging_config import get_logger, init_logging
from backend.src.utils.rate_limiter import limiter


APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Logs configuration gaps at startup instead of failing: the dashboard
    stays usable without push delivery, which is best-effort.
    """
    logger = get_logger("api")
    logger.info("Starting DailyPulse backend application")

    settings = get_settings()
    if not settings.jwt_configured:
        logger.warning("JWT_SECRET_KEY is not set; authenticated endpoints will reject every request")
    if not settings.firebase_configured:
        logger.info("FIREBASE_CREDENTIALS_PATH not set; push delivery uses application default credentials")
    if not settings.webhook_configured:
        logger.info("EVENT_WEBHOOK_SECRET not set; report-created webhook is disabled")

    yield

    logger.info("Shutting down DailyPulse backend application")


# Initialize logging before creating app
init_logging()

app = FastAPI(
    title="DailyPulse API",
    description="Backend API for the regional sales-reporting dashboard. "
                "Accepts daily reports and pushes notifications to administrators "
                "and regional managers when new reports arrive.",
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


cors_origins = [
    origin.strip()
    for origin in os.environ.get(
        "DAILYPULSE_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    if origin.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers


def _request_context(request: Request) -> Dict[str, Any]:
    return {"path": request.url.path, "method": request.method}


def _error_response(status_code: int, error: str, message: str, **details: Any) -> JSONResponse:
    """Uniform error body: {"error", "message", ...details}."""
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, **details},
    )


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Pydantic errors raised while building responses or internal models."""
    errors = exc.errors(include_url=False, include_context=False)
    get_logger("api").warning(
        "Model validation failed",
        extra={**_request_context(request), "errors": errors},
    )
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation Error",
        "Data validation failed",
        details=errors,
    )


@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Service errors that an endpoint did not translate itself."""
    get_logger("api").warning(
        f"Untranslated {type(exc).__name__}: {exc}",
        extra=_request_context(request),
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, type(exc).__name__, str(exc))


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    get_logger("db").error(
        f"Database error: {exc}",
        extra=_request_context(request),
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Database Error",
        "The database could not complete the request. Please retry shortly.",
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; the traceback goes to the api log only."""
    get_logger("api").error(
        f"Unhandled {type(exc).__name__}: {exc}",
        extra=_request_context(request),
        exc_info=True,
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "Something went wrong on our side. Please retry shortly.",
    )


@app.get("/health", tags=["Health"])
async def health_check() -> Dict[str, Any]:
    """Liveness probe; touches neither the database nor Firebase."""
    return {
        "status": "ok",
        "service": "dailypulse-backend",
        "version": APP_VERSION,
    }


# API routers
from backend.src.api import device_tokens, events, notifications, reports

for api_router in (reports.router, device_tokens.router, notifications.router, events.router):
    app.include_router(api_router, prefix="/api")
