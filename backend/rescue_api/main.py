"""
Animal Rescue API — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn rescue_api.main:app) and by the tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:                                            │
    │  ┌─────────────────────────┐ ┌─────────────────┐    │
    │  │ /animals, /animals/{id} │ │ GET /health     │    │
    │  │  → RequestDispatcher    │ │                 │    │
    │  └─────────────────────────┘ └─────────────────┘    │
    │                                                     │
    │  app.state.database   (one Database per process)    │
    │  app.state.dispatcher (RequestDispatcher over it)   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Connect the database (secret or DATABASE_URL), unless one was injected.
       Failure raises InitializationError and the server does not start.
    3. Build the repository and dispatcher

    Shutdown:
    1. Dispose the database engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rescue_api import __version__
from rescue_api.config import settings
from rescue_api.database import Database, connect_database
from rescue_api.exceptions import InitializationError, MethodNotSupportedError
from rescue_api.middleware.logging import RequestLoggingMiddleware
from rescue_api.middleware.request_id import RequestIDMiddleware, request_id_var
from rescue_api.routes import animals, health
from rescue_api.services.animal_repository import AnimalRepository
from rescue_api.services.dispatcher import RequestDispatcher
from rescue_api.services.responses import build_response

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def attach_database(app: FastAPI, database: Database) -> None:
    """Store the shared handle and the dispatcher built over it on app.state."""
    app.state.database = database
    app.state.dispatcher = RequestDispatcher(AnimalRepository(database))


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect the database on startup, dispose it on shutdown.

    A database that cannot be reached is fatal:
    InitializationError propagates and uvicorn aborts.
    """
    setup_logging()
    logger.info("Animal Rescue API %s starting up...", __version__)

    if getattr(app.state, "database", None) is None:
        try:
            database = await connect_database(settings)
        except InitializationError as e:
            logger.critical("Startup aborted: %s | Context: %s", e.message, e.context)
            raise
        attach_database(app, database)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Animal Rescue API shutting down...")
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Framework-level errors and a catch-all for anything that escapes the
    dispatcher.

    Expected failures are already rendered by build_response. Verbs that
    no route lists (TRACE, CONNECT, custom methods) are refused by the
    router before the dispatcher runs; those 405s are rendered the same
    way the dispatcher renders its own. The catch-all only sees bugs: the
    stack trace is logged, the caller gets a generic 500.
    """

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code != 405:
            return await http_exception_handler(request, exc)
        logger.warning("Method not allowed: %s %s", request.method, request.url.path)
        return animals.to_http_response(build_response(MethodNotSupportedError(request.method)))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unexpected error on %s %s: %s",
            rid,
            request.method,
            request.url.path,
            str(exc),
            exc_info=True,
        )
        return PlainTextResponse("Internal server error", status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Pre-built handle (tests pass one over SQLite). When None,
            the lifespan connects using settings.
    """
    app = FastAPI(
        title="Animal Rescue API",
        description="Shelter animal records: create, read, replace and delete.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    if database is not None:
        attach_database(app, database)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(animals.router)
    app.include_router(health.router)

    return app


app = create_app()
