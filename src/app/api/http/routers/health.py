"""Health check endpoints router for monitoring service availability."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from src.app.api.http.deps import get_database_service
from src.app.core.services import DbSessionService
from src.app.runtime.context import get_config

router = APIRouter(tags=["health"])


@router.get("/healthcheck")
def healthcheck() -> dict[str, str]:
    """The `healthcheck` procedure: liveness plus the server's current time."""
    return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}


@router.get("/health")
def health() -> dict[str, str]:
    """Basic health check endpoint - checks if app is running.

    This is a liveness probe that returns 200 OK as long as the application
    process is running. It does not check dependencies.
    """
    return {"status": "healthy", "service": "orders"}


@router.get("/health/ready", response_model=None)
def readiness(
    database_service: DbSessionService = Depends(get_database_service),
) -> dict[str, Any] | JSONResponse:
    """Readiness check - returns 503 when the database is unreachable."""
    config = get_config()
    db_healthy = database_service.health_check()

    response = {
        "status": "ready" if db_healthy else "not_ready",
        "environment": config.app.environment,
        "checks": {
            "database": {
                "status": "healthy" if db_healthy else "unhealthy",
                "type": "sqlite" if config.database.is_sqlite else "postgresql",
            }
        },
    }

    if not db_healthy:
        return JSONResponse(status_code=503, content=response)
    return response
