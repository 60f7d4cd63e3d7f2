"""
Bakery API — Health endpoint
"""
import asyncio

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from bakery_api.core.config import get_settings
from bakery_api.core.redis_client import get_redis

settings = get_settings()
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request):
    """
    Deep health check: pings MongoDB and, when rate limiting is on, Redis.
    Returns 200 if all dependencies are healthy, 503 otherwise.
    """
    deps: dict[str, str] = {}
    healthy = True

    try:
        store = request.app.state.store
        await asyncio.wait_for(store.ping(), timeout=settings.HEALTH_CHECK_TIMEOUT)
        deps["mongodb"] = "ok"
    except Exception as e:
        deps["mongodb"] = f"error: {str(e)[:100]}"
        healthy = False

    if settings.RATE_LIMIT_ENABLED:
        try:
            redis = get_redis()
            await asyncio.wait_for(redis.ping(), timeout=settings.HEALTH_CHECK_TIMEOUT)
            deps["redis"] = "ok"
        except Exception as e:
            deps["redis"] = f"error: {str(e)[:100]}"
            healthy = False

    return JSONResponse(
        content={"status": "healthy" if healthy else "degraded",
                 "service": settings.SERVICE_NAME, "version": settings.SERVICE_VERSION,
                 "dependencies": deps},
        status_code=200 if healthy else 503,
    )
