"""Shoe Catalog API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, exception handlers and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shoecatalog.api.brands import router as brands_router
from shoecatalog.api.catalogs import router as catalogs_router
from shoecatalog.api.health import router as health_router
from shoecatalog.api.middleware import setup_middleware
from shoecatalog.api.products import router as products_router
from shoecatalog.api.storage import router as storage_router
from shoecatalog.domain.exceptions import CatalogError
from shoecatalog.infrastructure.blob_store import build_blob_store
from shoecatalog.infrastructure.config import settings
from shoecatalog.infrastructure.logging_config import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    configure_logging(settings.log_level, json_output=settings.log_json)
    logger.info(
        "Starting Shoe Catalog API",
        version=settings.api_version,
        debug=settings.debug,
        blob_backend=settings.blob_backend,
    )

    app.state.blob_store = build_blob_store(settings)

    yield

    # Shutdown
    logger.info("Shutting down Shoe Catalog API")


# ============================================================================
# Custom Exception Handlers
# ============================================================================


def _error_body(
    request: Request, error_code: str, message: str, details: object = None
) -> dict:
    return {
        "error_code": error_code,
        "message": message,
        "details": details if details is not None else [],
        "request_id": getattr(request.state, "request_id", None),
    }


def _is_body_level(err: dict) -> bool:
    loc = tuple(err.get("loc", ()))
    if not loc or loc[0] != "body":
        return False
    # json_invalid carries the parse offset after "body"
    return len(loc) == 1 or err.get("type") == "json_invalid"


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Handle domain errors with their own status and error code."""
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            path=request.url.path,
            error_code=exc.error_code,
            error=exc.message,
        )
    else:
        logger.info(
            "Request rejected",
            path=request.url.path,
            error_code=exc.error_code,
            error=exc.message,
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.error_code, exc.message, exc.details),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 errors.

    A body that is missing, not JSON, or not an object is a caller error
    (``INVALID_REQUEST``); field-level schema failures are reported as
    ``VALIDATION_ERROR`` with one entry per field.
    """
    errors = exc.errors()
    if errors and all(_is_body_level(err) for err in errors):
        return JSONResponse(
            status_code=400,
            content=_error_body(
                request,
                "INVALID_REQUEST",
                "Request body must be a JSON object",
                [{"field": None, "message": errors[0].get("msg", "Invalid body")}],
            ),
        )

    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            or None,
            "message": err.get("msg", "Invalid value"),
        }
        for err in errors
    ]
    return JSONResponse(
        status_code=400,
        content=_error_body(request, "VALIDATION_ERROR", "Invalid request", details),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "NOT_FOUND" if exc.status_code == 404 else "ERROR"
        message = str(detail)
        details = []

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, error_code, message, details),
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )

    return JSONResponse(
        status_code=500,
        content=_error_body(request, "INTERNAL_ERROR", "An internal error occurred"),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance.
    """
    application = FastAPI(
        title="Shoe Catalog API",
        description="Brand and product catalog with PDF catalog generation",
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS middleware (must be added before custom middleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup custom middleware (request ID, error handling)
    setup_middleware(application)

    # Include routers
    application.include_router(health_router, tags=["Health"])
    application.include_router(brands_router)
    application.include_router(products_router)
    application.include_router(catalogs_router)
    application.include_router(storage_router)

    application.add_exception_handler(CatalogError, catalog_error_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(Exception, generic_exception_handler)

    return application


app = create_app()
