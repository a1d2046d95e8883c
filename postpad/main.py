"""
Postpad — FastAPI Application Factory
=======================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) builds the Database, TokenIssuer and PasswordHasher
       from one Settings object, stores them on `app.state`, and registers
       middleware, exception handlers, static files and routers.
Who:   uvicorn (`python -m postpad`, or `uvicorn --factory postpad.main:create_app`),
       the serverless entrypoint in api/index.py, and the test suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware:  [Request ID] → [Access log]            │
    │                                                      │
    │  Routes:                                             │
    │  ┌────────┐ ┌────────┐ ┌─────────┐ ┌──────────────┐  │
    │  │ pages  │ │  auth  │ │ profile │ │    posts     │  │
    │  └────────┘ └────────┘ └─────────┘ └──────────────┘  │
    │                          ▲ gated by require_identity │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → SELECT 1 against the database (fatal on failure)
              → optional create_all
    Shutdown: dispose the engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from postpad import __version__
from postpad.auth.gate import get_settings, redirect_to_login
from postpad.auth.passwords import PasswordHasher
from postpad.auth.tokens import TokenIssuer
from postpad.config import Settings, describe, load_settings
from postpad.database import Database
from postpad.exceptions import AuthExpiredOrInvalid, PostpadError
from postpad.middleware.logging import RequestLoggingMiddleware
from postpad.middleware.request_id import RequestIDMiddleware, request_id_var
from postpad.routes import auth, pages, posts, profile
from postpad.templating import BASE_DIR

logger = logging.getLogger(__name__)

NOT_FOUND_TEXT = "404 - Page not found"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup verifies the database is reachable; any failure is logged and
    re-raised so the server process exits instead of serving requests it
    cannot complete.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(settings.log_level)
    logger.info("Postpad %s starting up: %s", __version__, describe(settings))

    try:
        await database.ping()
    except Exception as e:
        logger.critical("Initial database connection failed: %s", str(e))
        raise

    if settings.db_create_tables:
        await database.create_tables()

    logger.info("Database connected; ready to serve")

    yield

    logger.info("Postpad shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to plain-text responses.

    Handler hierarchy:
        AuthExpiredOrInvalid    → 302 /login (cookie cleared when it failed to verify)
        PostpadError subclasses → exc.status_code with exc.message as the body
        HTTP 404/405            → 404 "404 - Page not found"
        RequestValidationError  → 400
        Exception (fallback)    → 500 "Internal server error"

    Responses never carry stack traces or SQL; `exc.context` is logged only.
    """

    @app.exception_handler(AuthExpiredOrInvalid)
    async def handle_auth_redirect(request: Request, exc: AuthExpiredOrInvalid):
        return redirect_to_login(get_settings(request), clear_cookie=exc.clear_cookie)

    @app.exception_handler(PostpadError)
    async def handle_app_error(request: Request, exc: PostpadError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s %s failed: %s | Context: %s",
                rid, request.method, request.url.path, exc.message, exc.context,
            )
        else:
            logger.warning(
                "[%s] %s %s rejected (%d): %s",
                rid, request.method, request.url.path, exc.status_code, exc.message,
            )
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return PlainTextResponse(NOT_FOUND_TEXT, status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        logger.warning("Malformed request to %s: %s", request.url.path, exc.errors())
        return PlainTextResponse("Bad request", status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return PlainTextResponse("Internal server error", status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Pre-built settings (tests). When omitted they are loaded from
                  the environment; missing DATABASE_URL/JWT_SECRET raise
                  ConfigurationError.
    """
    settings = settings or load_settings()

    app = FastAPI(
        title="Postpad",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = Database(settings)
    app.state.token_issuer = TokenIssuer.from_settings(settings)
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    # Last added runs first: RequestID wraps Logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    app.include_router(pages.router)
    app.include_router(auth.router)
    app.include_router(profile.router)
    app.include_router(posts.router)

    return app
