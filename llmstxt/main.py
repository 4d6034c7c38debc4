"""LLMs.txt Generator: FastAPI application entry point."""

import signal
import uuid
from contextlib import asynccontextmanager

# configure_structlog must run before the other package imports below create
# their module loggers (structlog caches the processor chain on first use).
from llmstxt.core.logging import configure_structlog
from llmstxt.core.config import get_settings as _get_settings_early

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else "INFO",
    json_logs=not _early_settings.debug,
)

import structlog

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from llmstxt.api.routes import api_router, proxy_router
from llmstxt.core.config import get_settings
from llmstxt.core.exceptions import CacheError, LlmsTxtError, OriginError, ShopNotInstalled
from llmstxt.db import init_db, close_db, init_redis, close_redis
from llmstxt.middleware.correlation import (
    setup_correlation_middleware,
    get_correlation_id,
)

logger = structlog.get_logger(__name__)

# Domain errors that escape a route, mapped to (status, client-facing detail)
ERROR_STATUS: list[tuple[type[LlmsTxtError], int, str | None]] = [
    (ShopNotInstalled, 404, None),
    (OriginError, 502, "Storefront API unavailable"),
    (CacheError, 503, "Cache store unavailable"),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.shutting_down = False

    def handle_sigterm(signum, frame):
        app.state.shutting_down = True
        logger.info("sigterm_received", action="health_check_503_draining_connections")

    signal.signal(signal.SIGTERM, handle_sigterm)

    settings = get_settings()
    logger.info("startup_begin", app_name=settings.app_name, debug=settings.debug)

    await init_db()
    logger.info("db_initialized", create_tables=settings.database_create_tables)

    if settings.cache_upsert_lock_enabled:
        await init_redis()
        logger.info("redis_initialized")
    else:
        logger.info("redis_skipped", reason="cache_upsert_lock_disabled")

    yield

    logger.info("shutdown_begin")
    await close_redis()
    await close_db()
    logger.info("shutdown_complete")


def _error_response(request: Request, status_code: int, detail, event: str, **context) -> JSONResponse:
    debug_id = str(uuid.uuid4())
    logger.error(
        event,
        status_code=status_code,
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        detail=detail,
        **context,
    )
    return JSONResponse(status_code=status_code, content={"detail": detail, "debug_id": debug_id})


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """HTTPException with a debug_id the client can quote in support requests."""
    return _error_response(request, exc.status_code, exc.detail, "http_exception")


async def llmstxt_exception_handler(request: Request, exc: LlmsTxtError) -> JSONResponse:
    for error_type, status_code, detail in ERROR_STATUS:
        if isinstance(exc, error_type):
            break
    else:
        status_code, detail = 500, "Internal server error"

    return _error_response(
        request,
        status_code,
        detail or str(exc),
        "llmstxt_exception",
        error=str(exc),
        error_type=type(exc).__name__,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unhandled errors: full traceback in the log, generic 500 to the client."""
    return _error_response(
        request,
        500,
        "Internal server error",
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Generates, caches and serves llms.txt for storefronts",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    # Only the embedded admin calls /api; the proxy route is fetched server-side
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT"],
        allow_headers=["*"],
    )
    setup_correlation_middleware(app)

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(LlmsTxtError, llmstxt_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(api_router, prefix="/api")
    app.include_router(proxy_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("llmstxt.main:app", host="0.0.0.0", port=8000, reload=_early_settings.debug)
