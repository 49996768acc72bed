"""Health check endpoint."""
from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from trustscore.config import get_settings
from trustscore.database.connection import get_engine
from trustscore.models import HealthResponse
from trustscore.services import get_redis_cache

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Check health status of the API and its database and cache.",
)
def health_check():
    """
    Check health of all dependencies.

    Returns 200 if all healthy, 503 if any unhealthy.
    """
    settings = get_settings()
    dependencies: dict[str, str] = {}

    # Check database
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        dependencies["database"] = "healthy"
    except SQLAlchemyError as e:
        dependencies["database"] = f"unhealthy: {str(e)}"

    # Check Redis
    redis_healthy, redis_error = get_redis_cache().health_check()
    dependencies["redis"] = "healthy" if redis_healthy else f"unhealthy: {redis_error}"

    all_healthy = all(v == "healthy" for v in dependencies.values())
    overall_status = "healthy" if all_healthy else "degraded"

    response = HealthResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app_version,
        dependencies=dependencies,
    )

    if not all_healthy:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(),
        )

    return response
