"""
Petly Backend: FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers;
       lifespan() handles startup checks and engine disposal.
Who:   uvicorn (`uvicorn petly.main:app`) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: Request ID → Logging → GZip → CORS     │
    │                                                     │
    │  Routes (/api):                                     │
    │    auth · shelters · adopters · favorites           │
    │    dogs · breeds · health                           │
    │                                                     │
    │  Exception Handlers:                                │
    │    PetlyError subclasses → 400/401/403/404/409/     │
    │                            502/503/500              │
    │    anything else         → 500 (logged with trace)  │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Tuple, Type

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from petly import __version__
from petly.config import settings
from petly.database import dispose_engine
from petly.exceptions import (
    DatabaseError,
    DuplicateError,
    EmailDeliveryError,
    ForbiddenError,
    NotFoundError,
    PetlyError,
    UnauthorizedError,
    UpstreamError,
    ValidationError,
)
from petly.middleware.logging import RequestLoggingMiddleware
from petly.middleware.request_id import RequestIDMiddleware, request_id_var
from petly.routes import adopters, auth, breeds, dogs, favorites, health, shelters

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, at startup.

    Format: 2024-01-15T12:00:00 [INFO] petly.services.merger: Dog search: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # These log every query / connection at INFO or DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Petly Backend %s starting up...", __version__)

    # Misconfiguration is logged, not fatal: local data still works
    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Petly Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

# Most specific class first: InvalidUpdateError is matched as ValidationError
_ERROR_STATUS: Dict[Type[PetlyError], Tuple[int, str]] = {
    ValidationError: (400, "validation_error"),
    UnauthorizedError: (401, "unauthorized"),
    ForbiddenError: (403, "forbidden"),
    NotFoundError: (404, "not_found"),
    DuplicateError: (409, "duplicate"),
    UpstreamError: (502, "upstream_error"),
    EmailDeliveryError: (503, "email_delivery_error"),
}


def _status_for(exc: PetlyError) -> Tuple[int, str]:
    for error_type, mapped in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return mapped
    return 500, "server_error"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and one error body shape:

        {"error": ..., "message": ..., "details": ..., "request_id": ...}

    Internal details (SQL, stack traces) are logged server-side and never
    included in the response.
    """

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "details": None,
                "request_id": rid,
            },
        )

    @app.exception_handler(PetlyError)
    async def handle_petly_error(request: Request, exc: PetlyError):
        rid = request_id_var.get("")
        status_code, code = _status_for(exc)
        if status_code >= 500:
            logger.error("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=status_code,
            content={
                "error": code,
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "details": None,
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Petly API",
        description=(
            "Pet adoption backend. Shelters list dogs, adopters search local "
            "and Petfinder dogs and shelters, favorite dogs and contact shelters."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware runs in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(shelters.router)
    app.include_router(adopters.router)
    app.include_router(favorites.router)
    app.include_router(dogs.router)
    app.include_router(breeds.router)
    app.include_router(health.router)

    return app


# uvicorn expects `petly.main:app` to be importable
app = create_app()
