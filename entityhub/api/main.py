"""
Entity Hub compliance API.

Startup migrates the schema and opens the SQLite pool before the first
request. Shutdown releases the pool and the reminder transport's HTTP
client.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from entityhub.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from entityhub.api.middleware.error_handler import setup_exception_handlers
from entityhub.api.routes import (
    compliance_router,
    directory_router,
    filing_types_router,
    filings_router,
    health_router,
    tasks_router,
)
from entityhub.config import configure_logging, get_logger, get_settings
from entityhub.infrastructure.notifications import close_notification_transport
from entityhub.infrastructure.storage.sqlite import close_pool, get_pool
from entityhub.infrastructure.storage.sqlite.migrations import run_migrations

logger = get_logger(__name__)

ROUTERS = (
    health_router,
    filing_types_router,
    filings_router,
    tasks_router,
    compliance_router,
    directory_router,
)


async def _open_storage() -> None:
    results = await run_migrations()
    failed = [r.version for r in results if not r.success]
    if failed:
        logger.error("startup_migrations_failed", versions=failed)
        raise RuntimeError(f"schema migration failed: {', '.join(failed)}")
    pool = await get_pool()
    logger.info("storage_ready", migrations_applied=len(results), pool_size=pool.pool_size)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger.info(
        "api_starting",
        host=settings.api.host,
        port=settings.api.port,
        notify_provider=settings.notify.provider,
    )
    await _open_storage()

    yield

    logger.info("api_stopping")
    for name, closer in (("sqlite_pool", close_pool), ("notifications", close_notification_transport)):
        try:
            await closer()
        except Exception as e:
            logger.warning("shutdown_step_failed", step=name, error=str(e))
    logger.info("api_stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging()

    docs_enabled = settings.api.debug
    app = FastAPI(
        title=settings.app_name,
        description="Recurring compliance filings, follow-up tasks and reminder digests",
        version=settings.app_version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        lifespan=lifespan,
    )

    # Starlette runs the last added middleware first
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def liveness() -> dict[str, str]:
        """Liveness probe for container orchestrators."""
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    api = get_settings().api
    uvicorn.run("entityhub.api.main:app", host=api.host, port=api.port, reload=api.debug)
