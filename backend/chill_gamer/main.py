"""
Chill Gamer Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
Why:   One application for every deployment target, instead of one copy of
       the routes per target.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       with its own Database on app.state.
Who:   Called by uvicorn (uvicorn chill_gamer.main:app) or the `chill-gamer`
       console script.

Application Architecture:
    ┌─────────────────────────────────────────────────────────────┐
    │                        FastAPI App                          │
    │                                                             │
    │  Middleware:   Request ID → Logging → GZip → CORS           │
    │                                                             │
    │  Routes:       /chill-gamer/reviews   /chill-gamer/watchlist │
    │                /chill-gamer/games     /chill-gamer/users     │
    │                /chill-gamer/search    /chill-gamer/genres    │
    │                /health                /                      │
    │                                                             │
    │  Exception Handlers:                                        │
    │    Validation/Conflict→400  NotFound→404                    │
    │    StorageUnavailable→503   Database/unexpected→500         │
    └─────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (MONGODB_URI missing → startup aborts)
    3. server target: connect to MongoDB (failure → startup aborts)

    Shutdown:
    1. Close the MongoDB client (all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from chill_gamer import __version__
from chill_gamer.config import settings
from chill_gamer.database import Database
from chill_gamer.exceptions import (
    ChillGamerError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from chill_gamer.middleware.logging import RequestLoggingMiddleware
from chill_gamer.middleware.request_id import RequestIDMiddleware, request_id_var
from chill_gamer.routes import games, health, reviews, search, users, watchlist

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # The driver logs every command/heartbeat at DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup and shutdown of the store connection.

    Unlike most configuration problems, a missing MONGODB_URI or an
    unreachable deployment is re-raised: every endpoint but / needs the
    store, so the process must not come up half-working.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Chill Gamer backend starting (target=%s, env=%s)",
                settings.deployment_target, settings.environment)

    try:
        settings.validate_required()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        raise

    database: Database = app.state.database
    if settings.deployment_target == "server":
        try:
            await database.connect()
        except StorageUnavailableError as e:
            logger.critical("Cannot start without the database: %s | %s", e.message, e.context)
            raise
    else:
        logger.info("Serverless target: connecting on first request")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Chill Gamer backend shutting down...")
    await database.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "request_id": request_id_var.get("")},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and `{"error": ...}` bodies.

    Handler hierarchy:
        ValidationError          → 400
        RequestValidationError   → 400 (unparsable body or parameter)
        ConflictError            → 400
        NotFoundError            → 404
        StorageUnavailableError  → 503
        DatabaseError            → 500
        ChillGamerError (base)   → 500
        Exception (fallback)     → 500, stack trace logged only
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            message = f"{location}: {first.get('msg', 'invalid value')}"
        else:
            message = "Invalid request"
        logger.warning("[%s] Request validation error: %s", request_id_var.get(""), message)
        return _error_response(400, message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error_response(400, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, exc.message)

    @app.exception_handler(StorageUnavailableError)
    async def handle_storage_unavailable(request: Request, exc: StorageUnavailableError):
        logger.error("[%s] Storage unavailable: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error_response(503, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("[%s] Database error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, exc.message)

    @app.exception_handler(ChillGamerError)
    async def handle_app_error(request: Request, exc: ChillGamerError):
        logger.error("[%s] Application error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(500, "An unexpected error occurred. Please try again later.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Database | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Storage client to use; built from settings when omitted.
                  Nothing connects until the lifespan (or first request,
                  for the serverless target) runs.
    """
    app = FastAPI(
        title="Chill Gamer API",
        description=(
            "Game reviews, watchlists, a game catalog and user profiles "
            "backed by MongoDB."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.database = database or Database(
        uri=settings.mongodb_uri,
        name=settings.database_name,
        timeout_ms=settings.db_timeout_ms,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(reviews.router)
    app.include_router(watchlist.router)
    app.include_router(games.router)
    app.include_router(users.router)
    app.include_router(search.router)
    app.include_router(health.router)

    return app


# uvicorn expects `chill_gamer.main:app` to be importable
app = create_app()


def run() -> None:
    """Console entry point: serve on BACKEND_HOST:PORT."""
    uvicorn.run(
        "chill_gamer.main:app",
        host=settings.backend_host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
