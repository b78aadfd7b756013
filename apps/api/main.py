"""Main FastAPI application."""

from contextlib import asynccontextmanager
from typing import Optional

import sentry_sdk
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from config import INSECURE_JWT_SECRET, Settings, get_settings
from core.database import Database
from core.exceptions import AppException, InternalError
from core.logging import setup_logging
from core.middleware import AuditLogMiddleware, LoggingMiddleware
from domain.audit.writer import AuditLogWriter
from routers import auth, health, investments, logs, products

logger = structlog.get_logger()


def _validate_security_config(settings: Settings):
    """Validate security configuration on startup."""
    errors = []

    # Skip validation in test environment
    if settings.is_test:
        logger.info("Skipping security validation in test environment")
        return

    if settings.jwt_secret == INSECURE_JWT_SECRET:
        if settings.environment == "production":
            errors.append(
                "CRITICAL: Using default JWT_SECRET! Set a secure random key in environment variables."
            )
        else:
            logger.warning("Using default JWT_SECRET. Do not deploy with this value.")

    if settings.environment == "production":
        if "password" in settings.database_url.lower() or "123" in settings.database_url:
            logger.warning(
                "Database URL contains weak password patterns. Use strong passwords in production."
            )

    # Fail fast if critical errors
    if errors:
        for error in errors:
            logger.error(error)
        raise RuntimeError(
            f"Security validation failed with {len(errors)} error(s). Fix configuration and restart."
        )


def _validation_error_body(exc: RequestValidationError) -> dict:
    """Group request validation errors into form-level and per-field messages."""
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}

    for error in exc.errors():
        message = error["msg"]
        if error["type"] == "value_error":
            # Strip pydantic's "Value error, " prefix
            message = str(error.get("ctx", {}).get("error", message))

        loc = [part for part in error["loc"] if part not in ("body", "query", "path")]
        if loc and isinstance(loc[0], str):
            field_errors.setdefault(loc[0], []).append(message)
        else:
            form_errors.append(message)

    return {"formErrors": form_errors, "fieldErrors": field_errors}


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around one database gateway."""
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        # Security validation on startup
        _validate_security_config(settings)

        # Startup
        logger.info("Starting Grip Invest API", version=settings.app_version)

        database = Database(settings)
        await database.create_all()
        app.state.database = database
        if settings.audit_log_enabled:
            app.state.audit_writer = AuditLogWriter(database)

        # Initialize Sentry
        if settings.sentry_dsn and settings.environment != "development":
            sentry_sdk.init(
                dsn=settings.sentry_dsn,
                environment=settings.environment,
                traces_sample_rate=settings.sentry_traces_sample_rate,
                profiles_sample_rate=settings.sentry_profiles_sample_rate,
                integrations=[
                    FastApiIntegration(transaction_style="endpoint"),
                    SqlalchemyIntegration(),
                ],
            )
            logger.info("Sentry initialized")

        yield

        # Shutdown
        logger.info("Shutting down Grip Invest API")
        writer = getattr(app.state, "audit_writer", None)
        if writer is not None:
            await writer.drain()
        await database.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_credentials,
        allow_methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
    )

    # Add custom middleware; the audit log is outermost so it sees final statuses
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        AuditLogMiddleware, excluded_prefix=settings.audit_log_excluded_prefix
    )

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        """Handle application exceptions."""
        logger.warning(
            "business_error",
            code=exc.code,
            message=exc.message,
            details=exc.details,
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.error})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Reject malformed input before any handler runs."""
        body = _validation_error_body(exc)
        logger.info("request_validation_failed", fields=list(body["fieldErrors"]))
        return JSONResponse(status_code=400, content={"error": body})

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error("unhandled_error", error=str(exc), exc_info=True)

        # Don't expose internal errors in production
        error_message = str(exc) if settings.debug else InternalError().message
        return JSONResponse(status_code=500, content={"error": error_message})

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(products.router, prefix="/api/products", tags=["Products"])
    app.include_router(
        investments.router, prefix="/api/investments", tags=["Investments"]
    )
    app.include_router(logs.router, prefix="/api/logs", tags=["Transaction Logs"])

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "running",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
