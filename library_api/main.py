"""
Library Catalog Application

create_app() assembles the service:

- lifespan: upload directory prepared (and tables created when
  AUTO_CREATE_TABLES is set) before the first request; the engine pool
  is released on shutdown
- middleware: slowapi throttling, CORS and one log line per request
- exception handlers: every failure leaves as
  {"success": false, "error": ...}, with "stack" added in debug mode
- routes: /api/authors, /api/categories, /api/books, the /uploads
  static mount, /health and /

Run locally with: uvicorn library_api.main:app --reload
"""

import logging
import time
import traceback
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from library_api import __version__
from library_api.config import get_settings
from library_api.database import create_tables, engine
from library_api.dependencies import DbSession
from library_api.exceptions import LibraryError
from library_api.routers import authors_router, books_router, categories_router
from library_api.services.rate_limiter import limiter, rate_limit_exceeded_handler
from library_api.services.uploads import get_cover_storage

# =============================================================================
# Logging Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    message: str,
    exc: Exception | None = None,
) -> JSONResponse:
    """Build the failure envelope; debug mode adds the traceback."""
    content: dict = {"success": False, "error": message}
    if settings.debug and exc is not None:
        content["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return JSONResponse(status_code=status_code, content=content)


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        prefix = f"{'.'.join(location)}: " if location else ""
        messages.append(f"{prefix}{error.get('msg', 'Invalid value')}")
    return "; ".join(messages) or "Invalid request"


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown hooks for the catalog."""
    # startup
    logger.info(f"Starting {settings.app_name} ({settings.environment})...")
    logger.info(f"Serving catalog under {settings.api_prefix} (debug={settings.debug})")

    get_cover_storage().ensure_directory()
    logger.info(f"Cover images stored in {settings.upload_dir.resolve()}")

    if settings.auto_create_tables:
        create_tables()
        logger.info("Database tables ensured")

    yield

    # shutdown
    logger.info("Releasing database connections")
    engine.dispose()


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    """
    Build the catalog application.

    Returns:
        FastAPI app with routers, middleware and handlers registered
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## Library Catalog API

A RESTful API for managing a library catalog.

### Features
- **Books**: CRUD with soft deletion, filtering and cover image upload
- **Authors**: Manage authors; each lists its books
- **Categories**: Unique category names; each lists its books

### Responses
Every response is an envelope: `{success, data, count?, message?}` on
success, `{success: false, error}` on failure.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials="*" not in settings.allowed_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Request Logging
    # -------------------------------------------------------------------------
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} "
            f"{response.status_code} {elapsed_ms:.1f}ms"
        )
        return response

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(LibraryError)
    async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
        """Catalog errors carry their own status code and message."""
        logger.info(
            f"{request.method} {request.url.path} rejected: "
            f"{type(exc).__name__}: {exc.message}"
        )
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Body/query validation failures are client errors (400)."""
        return error_response(status.HTTP_400_BAD_REQUEST, _validation_message(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Unknown routes (404), wrong methods (405) and similar."""
        response = error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        """Constraint violations not translated by a service."""
        logger.warning(f"Integrity error: {exc.orig}")
        return error_response(status.HTTP_400_BAD_REQUEST, "Duplicate field value entered")

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """
        Database failures not handled by a service.

        The driver message is logged, never returned.
        """
        logger.error(f"Database error: {exc}", exc_info=True)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "A database error occurred. Please try again later.",
            exc,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all: 500, with the traceback only in debug mode."""
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal Server Error",
            exc,
        )

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    app.include_router(authors_router, prefix=settings.api_prefix)
    app.include_router(categories_router, prefix=settings.api_prefix)
    app.include_router(books_router, prefix=settings.api_prefix)

    # -------------------------------------------------------------------------
    # Uploaded Cover Images
    # -------------------------------------------------------------------------
    get_cover_storage().ensure_directory()
    app.mount(
        settings.uploads_url_path,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API and its database are reachable.",
    )
    def health_check(db: DbSession) -> dict:
        """
        Liveness plus a database round trip.

        Reports "degraded" instead of failing when the database is down.
        """
        try:
            db.execute(text("SELECT 1"))
            database = "ok"
        except SQLAlchemyError as exc:
            logger.warning(f"Health check database error: {exc}")
            database = "unavailable"

        return {
            "status": "healthy" if database == "ok" else "degraded",
            "app": settings.app_name,
            "version": __version__,
            "database": database,
            "rate_limiting": {
                "enabled": settings.rate_limit_enabled,
                "default_limit": settings.rate_limit_default,
            },
        }

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
    )
    async def root() -> dict:
        """Entry points of the API."""
        return {
            "name": settings.app_name,
            "version": __version__,
            "api": settings.api_prefix,
            "docs": "/docs",
            "health": "/health",
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# uvicorn library_api.main:app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "library_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
