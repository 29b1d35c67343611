"""
Health Check Endpoints

Provides health and liveness checks for orchestration systems.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from fastapi import APIRouter
from pydantic import BaseModel

from game_balance.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Checks:
    - Event log directory is readable
    - Tutorial export directory is readable

    A missing directory degrades the service; uploads still work.
    """
    settings = get_settings()
    checks: Dict[str, Any] = {}
    overall_status = "healthy"

    for name, directory in (
        ("event_logs", settings.ingestion.data_dir),
        ("tutorial_logs", settings.tutorial.data_dir),
    ):
        if Path(directory).is_dir():
            checks[name] = {"status": "healthy", "directory": directory}
        else:
            checks[name] = {"status": "unavailable", "directory": directory}
            overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """
    Liveness probe endpoint.

    Returns 200 if the application is running.
    """
    return {"status": "alive"}
