"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from src.splicer.api.http.deps import get_database_service
from src.splicer.core.services import DbSessionService
from src.splicer.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe: 200 as long as the process is serving requests."""
    return {"status": "healthy", "service": "splicer"}


@router.get("/ready", response_model=None)
async def readiness(
    db: DbSessionService = Depends(get_database_service),
) -> dict[str, Any] | JSONResponse:
    """Readiness probe: 503 when the database cannot be reached."""
    config = get_config()
    db_healthy = db.health_check()
    body = {
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
        return JSONResponse(status_code=503, content=body)
    return body
