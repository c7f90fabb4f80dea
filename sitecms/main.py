"""SiteCMS: FastAPI application entry point."""

import uuid
from contextlib import asynccontextmanager

# configure_structlog runs before the other app imports: structlog caches the
# processor chain on first use.
from sitecms.core.logging import configure_structlog
from sitecms.core.config import get_settings as _get_settings_early

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else "INFO",
    json_logs=not _early_settings.debug,
)

import structlog

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sitecms.api.routes import api_router
from sitecms.api.routes.pages import html_router
from sitecms.core.config import get_settings
from sitecms.db.base import close_db, init_db
from sitecms.db.seed import seed_billing_cycles, seed_site_settings
from sitecms.middleware.correlation import get_correlation_id, setup_correlation_middleware
from sitecms.services.page_sources import ApiSectionSource

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    logger.info("startup_begin", app_name=settings.app_name, debug=settings.debug)

    await init_db()
    logger.info("db_initialized")

    if settings.seed_on_startup:
        await seed_billing_cycles()
        await seed_site_settings()
        logger.info("seed_data_ensured")

    app.state.api_section_source = None
    if settings.page_source == "api":
        app.state.api_section_source = ApiSectionSource(
            settings.internal_api_base_url,
            timeout=settings.section_fetch_timeout_seconds,
            admin_token=settings.admin_api_token,
        )
        logger.info("section_source_configured", source="api", base_url=settings.internal_api_base_url)

    yield

    logger.info("shutdown_begin")
    if app.state.api_section_source is not None:
        await app.state.api_section_source.aclose()
    await close_db()
    logger.info("shutdown_complete")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Log with a debug_id and answer with the error envelope."""
    debug_id = str(uuid.uuid4())
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "http_exception",
        status_code=exc.status_code,
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        detail=exc.detail,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail, "debug_id": debug_id},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and parameters answer 400, not 422."""
    debug_id = str(uuid.uuid4())
    errors = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    logger.info(
        "request_validation_failed",
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        errors=errors,
    )
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request",
            "message": "Invalid request",
            "errors": errors,
            "debug_id": debug_id,
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the full exception; return a generic 500 with no internals."""
    debug_id = str(uuid.uuid4())
    logger.error(
        "unhandled_exception",
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "message": "Something went wrong. Please try again.",
            "debug_id": debug_id,
        },
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Marketing site CMS: pages, pricing, forms",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url, settings.site_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Correlation ID middleware (runs first on incoming requests)
    setup_correlation_middleware(app)

    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(RequestValidationError)(validation_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    app.include_router(api_router, prefix="/api")
    # Catch-all page routes go last so /api paths win
    app.include_router(html_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sitecms.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
