"""
Notebench Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, exception handling,
       and the data-access lifecycle in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn notebench.main:app`) or `python -m notebench.main`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  Request ID → Rate Limit → Access Log → GZip → CORS │
    │                                                     │
    │  Routes:                                            │
    │  /api/notes   /api/project   /api/users   /health   │
    │                                                     │
    │  Exception Handlers (one envelope for all):         │
    │  400 validation │ 401 auth │ 403 forbidden │ 404    │
    │  409 conflict   │ 429 rate │ 500 db / unexpected    │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging, validate configuration
    2. Construct the Database context and wait until it answers SELECT 1
       (startup fails, and the server never listens, if it never does)
    3. Optionally create tables (DB_CREATE_ALL)
    4. Store the context on app.state.db

    Shutdown:
    1. Dispose the engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notebench import __version__
from notebench.config import Settings, settings as default_settings
from notebench.database import Database
from notebench.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotebenchError,
)
from notebench.middleware.logging import RequestLoggingMiddleware
from notebench.middleware.rate_limit import RateLimitMiddleware
from notebench.middleware.request_id import RequestIDMiddleware, request_id_var
from notebench.routes import health, notes, projects, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

def build_lifespan(config: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(config.log_level)
        logger.info("Notebench Backend %s starting up...", __version__)

        try:
            config.validate_required_for_production()
        except ValueError as e:
            # Development keeps running with the default secret
            logger.warning("Configuration warning: %s", str(e))

        database = Database.from_settings(config)
        try:
            await database.wait_until_ready(
                attempts=config.db_connect_attempts,
                min_wait=config.db_connect_min_wait,
                max_wait=config.db_connect_max_wait,
            )
            if config.db_create_all:
                await database.create_all()
                logger.info("Database tables ensured")
        except Exception:
            logger.error("Database is unreachable; refusing to start")
            await database.dispose()
            raise

        app.state.db = database
        logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)

        yield

        logger.info("Notebench Backend shutting down...")
        await database.dispose()
        logger.info("Shutdown complete.")

    return lifespan


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _envelope(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every failure onto one JSON envelope.

    Handler hierarchy:
        RequestValidationError  → 400 (malformed body)
        AuthenticationError     → 401 + WWW-Authenticate
        NotebenchError subtypes → their own status_code
        DatabaseError           → 500, generic message, details logged only
        HTTPException           → its status (e.g. 405, unknown route 404)
        Exception (fallback)    → 500, stack trace logged only
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(p) for p in err["loc"][1:]) or "body", "message": err["msg"]}
            for err in exc.errors()
        ]
        logger.info("[%s] Rejected request body: %s", request_id_var.get(""), errors)
        return JSONResponse(
            status_code=400,
            content=jsonable_encoder(
                _envelope("validation_error", "Request validation failed", {"errors": errors})
            ),
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=exc.status_code,
            content=_envelope(exc.error_code, exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_envelope("server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(NotebenchError)
    async def handle_app_error(request: Request, exc: NotebenchError):
        # context may hold internals; only the field name is safe to echo
        details = {"field": exc.context["field"]} if "field" in exc.context else None
        return JSONResponse(
            status_code=exc.status_code,
            content=_envelope(exc.error_code, exc.message, details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_envelope("http_error", str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_envelope(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to use; defaults to the environment-loaded singleton.
    """
    config = config or default_settings

    app = FastAPI(
        title="Notebench API",
        description=(
            "Authenticated CRUD for notes, projects and project tasks. "
            "Every record is visible only to the user who owns it."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=build_lifespan(config),
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → RateLimit → Logging → GZip → CORS
    # RequestID is outermost so 429 responses carry the id too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=config.rate_limit_requests,
        window_seconds=config.rate_limit_window,
    )
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(notes.router)
    app.include_router(projects.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve `app` with uvicorn on the configured address."""
    import uvicorn

    uvicorn.run(
        "notebench.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
