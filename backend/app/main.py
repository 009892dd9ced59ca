"""Storefront Backend - FastAPI Application Factory."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import api_router
from app.api.deps import get_token_codec
from app.api.errors import register_exception_handlers
from app.core import async_session_maker, settings, setup_logging
from app.core.logging import get_logger
from app.services.revocation import RevocationStore

logger = get_logger("main")


def task_done_callback(task: asyncio.Task[None]) -> None:
    """Log unhandled exceptions from background tasks."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Background task {task.get_name()} failed: {exc}")


async def purge_revoked_tokens() -> int:
    """Remove stale revocation records in a session of its own."""
    async with async_session_maker() as db:
        removed = await RevocationStore(db).purge_expired()
        await db.commit()
    return removed


async def _revocation_cleanup_loop(interval_seconds: int) -> None:
    """Periodically remove expired revocation records."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = await purge_revoked_tokens()
            if removed > 0:
                logger.info(f"Cleaned up {removed} expired revocation records")
        except Exception:
            logger.exception("Error cleaning up revoked tokens")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    setup_logging(
        level=settings.log_level,
        format_type="structured" if not settings.debug else "dev",
    )
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    for warning in settings.check_security_configuration():
        logger.warning(f"SECURITY: {warning}")

    # Raises ConfigError when no signing secret is configured
    get_token_codec()

    cleanup_task = asyncio.create_task(
        _revocation_cleanup_loop(settings.revocation_cleanup_interval_seconds),
        name="revocation-cleanup",
    )
    cleanup_task.add_done_callback(task_done_callback)

    yield

    logger.info("Shutting down...")
    cleanup_task.cancel()
    with suppress(asyncio.CancelledError):
        await cleanup_task


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Product catalog and account API",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )

    register_exception_handlers(app)

    # Credentials are allowed so the browser sends the auth cookies
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
        ],
    )

    # Prometheus metrics (before routers so /metrics endpoint is registered first)
    if settings.enable_metrics:
        from prometheus_fastapi_instrumentator import Instrumentator

        Instrumentator(
            excluded_handlers=["/health", "/metrics"],
        ).instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    app.include_router(api_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
        }

    return app


# Application instance
app = create_app()
