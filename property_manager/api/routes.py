"""Health and diagnostics routes."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from property_manager.core.logging_config import get_log_buffer
from property_manager.services import WeatherstackClient

from .deps import get_weather_client

health_router = APIRouter(tags=["system"])


@health_router.get("/health", summary="Service health probe")
async def healthcheck() -> dict[str, str]:
    """Return a simple heartbeat for orchestration layers."""

    return {"status": "ok"}


@health_router.get("/health/weather", summary="Weatherstack connectivity check")
def weather_healthcheck(
    weather: WeatherstackClient = Depends(get_weather_client),
) -> dict[str, Any]:
    ok = weather.test_connection()
    return {"status": "ok" if ok else "degraded", "weatherstack": ok, "mock": weather.is_mock}


logs_router = APIRouter(prefix="/logs", tags=["logs"])


@logs_router.get("")
def list_logs(
    limit: int = Query(100, ge=1, le=500),
    level: Optional[str] = Query(None, description="Minimum level, e.g. WARNING"),
) -> dict[str, list[dict[str, Any]]]:
    try:
        entries = get_log_buffer(limit=limit, level=level)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"logs": entries}
