"""Liveness and dependency checks for the compliance service."""

import time

from fastapi import APIRouter

from entityhub.application.dto.responses import HealthResponse, ProviderHealthResponse
from entityhub.config import get_settings
from entityhub.infrastructure.storage.sqlite import get_connection

router = APIRouter(prefix="/api/health", tags=["health"])

_started = time.monotonic()


def _report(status: str, **providers: ProviderHealthResponse) -> HealthResponse:
    return HealthResponse(
        status=status,
        version=get_settings().app_version,
        uptime_seconds=time.monotonic() - _started,
        **providers,
    )


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return _report("healthy")


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """Round-trip a trivial query through the SQLite pool."""
    started = time.perf_counter()
    try:
        async with get_connection() as conn:
            await conn.execute("SELECT 1")
    except Exception as e:
        database = ProviderHealthResponse(name="sqlite", available=False, error=str(e))
    else:
        database = ProviderHealthResponse(
            name="sqlite",
            available=True,
            latency_ms=(time.perf_counter() - started) * 1000,
        )
    return _report("healthy" if database.available else "unhealthy", database=database)


@router.get("/notifications", response_model=HealthResponse)
async def notifications_health() -> HealthResponse:
    """Whether the configured reminder provider can send at all."""
    notify = get_settings().notify
    ready = notify.provider == "log" or bool(notify.api_key)
    return _report(
        "healthy" if ready else "degraded",
        notifications=ProviderHealthResponse(
            name=notify.provider,
            available=ready,
            error=None if ready else "NOTIFY_API_KEY is not set",
        ),
    )
