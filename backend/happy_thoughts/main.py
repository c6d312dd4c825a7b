"""
Happy Thoughts Backend — FastAPI Application Factory
=====================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds (or receives) the database engine, attaches it to
       app.state, registers middleware, exception handlers and routes.
Who:   uvicorn (`happy_thoughts.main:app`) and the test suite, which passes
       its own in-memory engine.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:   CORS → Request ID → Logging → GZip   │
    │                                                     │
    │  Routes:       GET /   GET /health   /thoughts...   │
    │                                                     │
    │  Exception Handlers:                                │
    │    Validation→400  Duplicate→400  Malformed→400     │
    │    NotFound→404    anything else→500                │
    │                                                     │
    │  app.state:    settings, engine, session_factory    │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, log the bound address
    Shutdown: dispose the database engine
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
from sqlalchemy.ext.asyncio import AsyncEngine

from happy_thoughts import __version__
from happy_thoughts.config import Settings, settings as default_settings
from happy_thoughts.database import (
    create_engine_from_settings,
    create_session_factory,
    dispose_engine,
)
from happy_thoughts.exceptions import (
    DuplicateKeyError,
    MalformedRequestError,
    NotFoundError,
    ValidationError,
)
from happy_thoughts.middleware.logging import RequestLoggingMiddleware
from happy_thoughts.middleware.request_id import (
    RequestIDMiddleware,
    internal_error_response,
    request_id_var,
)
from happy_thoughts.routes import health, thoughts

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure logging for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] happy_thoughts.access: GET /thoughts 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings

    setup_logging(app_settings.log_level)
    logger.info("Happy Thoughts API %s starting up...", __version__)
    logger.info("Database: %s", app.state.engine.url.render_as_string(hide_password=True))
    logger.info("Server ready at http://%s:%d", app_settings.host, app_settings.port)

    yield

    logger.info("Happy Thoughts API shutting down...")
    await dispose_engine(app.state.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def validation_error_response(exc: ValidationError) -> JSONResponse:
    rid = request_id_var.get("")
    logger.warning("[%s] Validation error: %s", rid, exc.message)
    return JSONResponse(
        status_code=400,
        content={
            "error": "validation_error",
            "message": exc.message,
            "details": exc.errors,
            "request_id": rid,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400 validation_error
        DuplicateKeyError                        → 400 duplicate_key
        MalformedRequestError                    → 400 invalid_request
        NotFoundError                            → 404 not_found
        Exception (fallback)                     → 500 internal_server_error

    Every error produces exactly one response; none stops the server.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Body failed the schema (message length, digits, missing, negative hearts)."""
        return validation_error_response(
            ValidationError(
                message="Thought validation failed",
                errors=jsonable_encoder(exc.errors()),
            )
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        return validation_error_response(exc)

    @app.exception_handler(DuplicateKeyError)
    async def handle_duplicate_key(request: Request, exc: DuplicateKeyError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=400,
            content={
                "error": "duplicate_key",
                "message": exc.message,
                "fields": exc.fields,
                "request_id": rid,
            },
        )

    @app.exception_handler(MalformedRequestError)
    async def handle_malformed_request(request: Request, exc: MalformedRequestError):
        rid = request_id_var.get("")
        logger.warning("[%s] Invalid request: %s", rid, exc.context)
        return JSONResponse(
            status_code=400,
            content={
                "error": "invalid_request",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Last resort outside the middleware chain.

        RequestIDMiddleware normally answers unexpected errors first; this
        only sees exceptions raised by the middleware themselves.
        """
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return internal_error_response(rid)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Configuration; defaults to the environment-loaded settings.
        engine: Storage handle; built from app_settings.database_url when omitted.

    Returns:
        Fully configured FastAPI instance. The engine and session factory live
        on app.state so handlers never reach for a module-level global.
    """
    app_settings = app_settings or default_settings
    engine = engine or create_engine_from_settings(app_settings)

    app = FastAPI(
        title="Happy Thoughts API",
        description="Post short thoughts, list the newest ones, and like them.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute; CORS is outermost so 500s get its headers

    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    origins = app_settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentials with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(thoughts.router)

    return app


# uvicorn expects `happy_thoughts.main:app` to be importable
app = create_app()
