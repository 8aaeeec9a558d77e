"""
Backend — FastAPI Application Factory
=======================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, exception handling
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Served by uvicorn (`uvicorn app.main:app`, or `fastapi run app/main.py`
       in the backend container).

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware:  Request ID → Logging → CORS            │
    │                                                      │
    │  Routes (/api/v1):                                   │
    │    login · users · items · utils · private (local)   │
    │  Routes (root):                                      │
    │    /health · /docs · /redoc                          │
    │                                                      │
    │  Exception Handlers:                                 │
    │    Validation→400 │ Credentials/Permission→403       │
    │    NotFound→404 │ Conflict→409 │ Email→503 │ DB→500  │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, log the service URL directory
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from app import __version__
from app.config import settings
from app.database import dispose_engine
from app.exceptions import (
    AppError,
    ConflictError,
    CredentialsError,
    DatabaseError,
    EmailDeliveryError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import health, items, login, private, users, utils
from app.services.service_directory import build_service_directory

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout, which `docker compose logs backend` collects.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,  # Override uvicorn's default config
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)
    logging.getLogger("aiosmtplib").setLevel(logging.WARNING)


def log_service_directory() -> None:
    directory = build_service_directory(settings)
    logger.info(
        "Service URLs (%s mode, DOMAIN=%s, ENVIRONMENT=%s):",
        directory.mode,
        directory.domain,
        directory.environment,
    )
    for service in directory.ordered():
        logger.info("  %-24s %s", service.label, service.url or "(not deployed)")


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("%s backend starting up (v%s)...", settings.project_name, __version__)
    if not settings.emails_enabled:
        logger.warning("SMTP_HOST/EMAILS_FROM_EMAIL not set: email features are disabled")
    log_service_directory()
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        CredentialsError        → 403 Forbidden (+ WWW-Authenticate: Bearer)
        PermissionDeniedError   → 403 Forbidden
        NotFoundError           → 404 Not Found
        ConflictError           → 409 Conflict
        EmailDeliveryError      → 503 Service Unavailable
        DatabaseError           → 500 Internal Server Error (generic message)
        AppError (base)         → 500 Internal Server Error
        Exception (fallback)    → 500 Internal Server Error

    5xx responses never include exception context; it is logged instead.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.info("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(CredentialsError)
    async def handle_credentials_error(request: Request, exc: CredentialsError):
        return _error_response(
            403,
            "invalid_credentials",
            exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(PermissionDeniedError)
    async def handle_permission_denied(request: Request, exc: PermissionDeniedError):
        logger.warning(
            "[%s] Permission denied on %s %s: %s",
            request_id_var.get(""),
            request.method,
            request.url.path,
            exc.message,
        )
        return _error_response(403, "permission_denied", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error_response(409, "conflict", exc.message, exc.context)

    @app.exception_handler(EmailDeliveryError)
    async def handle_email_error(request: Request, exc: EmailDeliveryError):
        rid = request_id_var.get("")
        logger.error("[%s] Email delivery error: %s | Context: %s", rid, exc.message, exc.context)
        return _error_response(503, "email_delivery_error", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return _error_response(
            500,
            "server_error",
            "An internal error occurred. Please try again later.",
        )

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        rid = request_id_var.get("")
        logger.error("[%s] Unhandled application error: %s", rid, exc.message)
        return _error_response(500, "internal_server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def custom_generate_unique_id(route: APIRoute) -> str:
    """Operation IDs like `users-read_user_me`, used by the generated frontend client."""
    tag = route.tags[0] if route.tags else "default"
    return f"{tag}-{route.name}"


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    The private router is only mounted in the local environment.
    """
    app = FastAPI(
        title=settings.project_name,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=f"{settings.api_v1_str}/openapi.json",
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → CORS
    if settings.cors_origins_list:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Total-Count"],
        )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    for router in (login.router, users.router, utils.router, items.router):
        app.include_router(router, prefix=settings.api_v1_str)
    if settings.environment == "local":
        app.include_router(private.router, prefix=settings.api_v1_str)
    app.include_router(health.router)

    return app


app = create_app()
