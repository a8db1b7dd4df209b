"""
Health check endpoints.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from tableside_shared.config.settings import settings
from tableside_shared.infrastructure.db import SessionLocal
from tableside_shared.infrastructure.redis_pool import get_redis_pool


router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
def health_check():
    """Basic liveness check."""
    return {
        "status": "healthy",
        "service": "tableside-api",
        "environment": settings.environment,
    }


@router.get("/detailed")
async def detailed_health_check():
    """
    Verifies connectivity to the database and Redis.
    Responds 503 when either is down.
    """
    checks = {
        "service": "tableside-api",
        "environment": settings.environment,
        "dependencies": {},
    }
    all_healthy = True

    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        checks["dependencies"]["database"] = {"status": "healthy"}
    except Exception as e:
        checks["dependencies"]["database"] = {"status": "unhealthy", "error": str(e)}
        all_healthy = False

    try:
        redis = await get_redis_pool()
        await redis.ping()
        checks["dependencies"]["redis"] = {"status": "healthy"}
    except Exception as e:
        checks["dependencies"]["redis"] = {"status": "unhealthy", "error": str(e)}
        all_healthy = False

    checks["status"] = "healthy" if all_healthy else "degraded"

    if not all_healthy:
        return JSONResponse(content=checks, status_code=503)
    return checks
