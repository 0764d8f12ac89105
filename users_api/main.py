"""
Users API — FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       wired to one DocumentStore; the lifespan connects that store on
       startup and closes it on shutdown.
Who:   Called by uvicorn (`uvicorn users_api.main:app`) or the `users-api`
       console script (run()).

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware:  Request ID → Logging → GZip → CORS     │
    │                                                      │
    │  Routes:      /users  /users/{id}   /health          │
    │                                                      │
    │  Exception Handlers (plain text bodies):             │
    │  NotFoundError → 404 │ bad body, StoreError, * → 500 │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Connect the store (retried with backoff); give up → StoreConnectionError,
       which aborts startup and makes uvicorn exit non-zero
    Shutdown:
    1. Close the store's connection pool
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import PlainTextResponse
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    stop_after_attempt,
    wait_exponential_jitter,
)
from tenacity.wait import wait_base

from users_api import __version__
from users_api.config import settings
from users_api.exceptions import (
    NotFoundError,
    StoreConnectionError,
    StoreError,
    UsersApiError,
)
from users_api.middleware.logging import RequestLoggingMiddleware
from users_api.middleware.request_id import RequestIDMiddleware, request_id_var
from users_api.routes import health, users
from users_api.services.user_service import UserService
from users_api.stores import DocumentStore, create_store

logger = logging.getLogger(__name__)

INTERNAL_SERVER_ERROR = "Internal Server Error"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Called once during startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-operation chatter from servers and drivers
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "pymongo", "motor"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Store Connection
# ══════════════════════════════════════════════════════════════════════════

async def connect_store(
    store: DocumentStore,
    attempts: Optional[int] = None,
    wait: Optional[wait_base] = None,
) -> None:
    """
    Connect `store`, retrying with exponential backoff and jitter.

    Args:
        store: The store to connect.
        attempts: Maximum connection attempts (default: settings.store_connect_attempts).
        wait: Tenacity wait strategy between attempts (default: exponential
            jitter between store_connect_min_wait and store_connect_max_wait).

    Raises:
        StoreConnectionError: Every attempt failed. The last driver error is
            chained as __cause__ and logged; it is never shown to clients.
    """
    attempts = attempts or settings.store_connect_attempts
    if wait is None:
        wait = wait_exponential_jitter(
            initial=settings.store_connect_min_wait,
            max=settings.store_connect_max_wait,
            jitter=1,
        )

    retrying = AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait,
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )

    try:
        async for attempt in retrying:
            with attempt:
                await store.connect()
    except Exception as e:
        logger.error(
            "Could not connect to the document store after %d attempt(s): %s",
            attempts,
            str(e),
        )
        raise StoreConnectionError(
            attempts=attempts,
            context={"error_type": type(e).__name__},
        ) from e


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect the store before serving and close it after.

    A store that cannot be reached is fatal: StoreConnectionError escapes
    the lifespan, the ASGI server reports the startup failure and exits.
    """
    setup_logging()
    store: DocumentStore = app.state.store

    logger.info("Users API %s starting up (store: %s)", __version__, type(store).__name__)
    await connect_store(store)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Users API shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to plain-text HTTP responses.

    Handler hierarchy:
        NotFoundError          → 404, the exception's message
        RequestValidationError → 500, generic message; error locations logged
        StoreError             → 500, generic message (already logged by the service)
        UsersApiError          → 500, generic message (catch-all for custom)
        Exception              → 500, generic message; traceback logged

    Error bodies never include internal details or echo the client's input.
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return PlainTextResponse(exc.message, status_code=404)

    @app.exception_handler(RequestValidationError)
    async def handle_invalid_body(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        problems = [
            "%s (%s)" % (".".join(str(part) for part in err.get("loc", ())), err.get("type"))
            for err in exc.errors()
        ]
        logger.error("[%s] Unusable request body for %s %s: %s",
                     rid, request.method, request.url.path, "; ".join(problems))
        return PlainTextResponse(INTERNAL_SERVER_ERROR, status_code=500)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = request_id_var.get("")
        logger.debug("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return PlainTextResponse(INTERNAL_SERVER_ERROR, status_code=500)

    @app.exception_handler(UsersApiError)
    async def handle_app_error(request: Request, exc: UsersApiError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return PlainTextResponse(INTERNAL_SERVER_ERROR, status_code=500)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return PlainTextResponse(INTERNAL_SERVER_ERROR, status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(store: Optional[DocumentStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: The document store to serve from. Defaults to the backend
            selected by settings.database_url. The store is not connected
            here; the lifespan does that (tests connect it themselves).

    Returns:
        Fully configured FastAPI instance.
    """
    app = FastAPI(
        title="Users API",
        description="Create, read, update and delete users in a document store.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    if store is None:
        store = create_store(settings.database_url)
    app.state.store = store
    app.state.user_service = UserService(store)

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
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

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(users.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console-script entry point: serve the app with uvicorn."""
    uvicorn.run(
        "users_api.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `users_api.main:app` to be importable
app = create_app()


if __name__ == "__main__":
    run()
