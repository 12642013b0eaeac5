import time
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.schemas import HealthResponse

router = APIRouter()

SERVICE_NAME = "lumi-api"
SERVICE_VERSION = "1.0.0"


async def _redis_health(redis) -> dict[str, Any]:
    if redis is None:
        return {"healthy": False, "error": "Redis not configured", "latency_ms": None}
    try:
        start = time.time()
        await redis.ping()
        latency_ms = round((time.time() - start) * 1000, 2)
        return {"healthy": True, "error": None, "latency_ms": latency_ms}
    except Exception as e:
        return {"healthy": False, "error": str(e), "latency_ms": None}


def _dependency(health: dict[str, Any]) -> dict[str, Any]:
    return {
        "status": "connected" if health["healthy"] else "disconnected",
        "latency_ms": health.get("latency_ms"),
        "error": health.get("error"),
    }


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check(request: Request):
    db_manager = getattr(request.app.state, "db_manager", None)
    if db_manager is None:
        db_health = {"healthy": False, "error": "Database unavailable", "latency_ms": None}
    else:
        db_health = await db_manager.health_check()
    redis_health = await _redis_health(getattr(request.app.state, "redis", None))

    healthy = db_health["healthy"] and redis_health["healthy"]
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "database": _dependency(db_health),
            "redis": _dependency(redis_health),
        },
    )
