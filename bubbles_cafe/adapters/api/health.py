from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter
from pydantic import BaseModel

from bubbles_cafe.core.config.settings import settings
from bubbles_cafe.core.logging import logger
from bubbles_cafe.infrastructure.database import check_database_health

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    version: str
    services: Dict[str, Any]
    timestamp: datetime


async def check_database_health_async() -> Dict[str, Any]:
    """Check database connection health."""
    try:
        is_healthy = await check_database_health()
        return {"status": "healthy" if is_healthy else "unhealthy"}
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return {"status": "unhealthy", "error": str(e)}


@router.get("", response_model=HealthResponse)
async def health_check():
    """
    Service health, including the database that backs the session store.
    """
    db_health = await check_database_health_async()
    overall_status = "ok" if db_health["status"] == "healthy" else "degraded"

    return HealthResponse(
        status=overall_status,
        env=settings.APP_ENV,
        version=settings.VERSION,
        services={"database": db_health},
        timestamp=datetime.now(timezone.utc),
    )
