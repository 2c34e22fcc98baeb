"""
Cash Card Service - FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers;
       the module-level `app` is what uvicorn serves
       (uvicorn cashcard.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────────┐ ┌─────────────────┐  │
    │  │  Req ID  │→│  Rate Limit  │→│  Logging        │  │
    │  └──────────┘ └──────────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌───────────────────┐ ┌──────────────┐ ┌─────────┐ │
    │  │ GET /cashcards/id │ │ POST / GET   │ │ /health │ │
    │  └───────────────────┘ └──────────────┘ └─────────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ InvalidParam/Decode→400 │ NotFound→404 │ →500 │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, optionally create the schema, log readiness
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, Response

from cashcard import __version__
from cashcard.config import settings
from cashcard.database import dispose_engine, init_schema
from cashcard.exceptions import (
    CashCardError,
    DecodeError,
    InvalidParameterError,
    NotFoundError,
    StorageError,
)
from cashcard.middleware.logging import RequestLoggingMiddleware
from cashcard.middleware.rate_limit import RateLimitMiddleware
from cashcard.middleware.request_id import RequestIDMiddleware, request_id_var
from cashcard.routes import cash_cards, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: logging and optional schema creation. Shutdown: close the pool."""
    setup_logging()
    logger.info("=" * 60)
    logger.info("Cash Card Service %s starting up...", __version__)

    if settings.db_auto_create_schema:
        await init_schema()
        logger.info("Database schema ensured (DB_AUTO_CREATE_SCHEMA=true)")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Cash Card Service shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler hierarchy:
        InvalidParameterError → 400 Bad Request
        DecodeError           → 400 Bad Request
        NotFoundError         → 404 Not Found, empty body
        StorageError          → 500 Internal Server Error
        CashCardError (base)  → 500 Internal Server Error
        Exception (fallback)  → 500 Internal Server Error

    Responses never include stack traces or driver messages; those go to
    the server log only.
    """

    @app.exception_handler(InvalidParameterError)
    async def handle_invalid_parameter(request: Request, exc: InvalidParameterError):
        rid = request_id_var.get("")
        logger.warning("[%s] Invalid parameter: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "invalid_parameter",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(DecodeError)
    async def handle_decode_error(request: Request, exc: DecodeError):
        rid = request_id_var.get("")
        logger.warning("[%s] Decode error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "decode_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        """Unknown id: 404 with no body."""
        return Response(status_code=404)

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        rid = request_id_var.get("")
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "storage_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(CashCardError)
    async def handle_cash_card_error(request: Request, exc: CashCardError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": exc.message,
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
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Cash Card API",
        description="Create, fetch and list cash cards with pagination and sorting.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → RateLimit → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "Location",
            "X-Request-ID",
            "X-Total-Count",
            "Retry-After",
        ],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(cash_cards.router)
    app.include_router(health.router)

    return app


app = create_app()
