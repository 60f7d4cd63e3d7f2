"""
Bakery API — Sliding window rate limiter middleware (Redis-backed)

Limits the public submission and listing routes to RATE_LIMIT_MAX_REQUESTS
per RATE_LIMIT_WINDOW_SECONDS per client address, using a sorted set per
client (ZADD/ZREMRANGEBYSCORE/ZCARD).
"""
import time
import uuid

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from bakery_api.core.config import get_settings
from bakery_api.core.redis_client import get_redis

settings = get_settings()

RATE_LIMIT_PREFIX = "ratelimit:"

RATE_LIMITED_PATHS = {
    "/api/order/handlePayOnline",
    "/api/order/handleCashOrder",
    "/api/order/addCustomOrder",
    "/api/catering/addCateringOrder",
    "/api/menu/getMenuItem",
    "/api/recipes/getRecipes",
    "/api/contact/addContactItem",
    "/api/about/getAbout",
}


class SlidingWindowRateLimiter(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path.rstrip("/") not in RATE_LIMITED_PATHS:
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        key = f"{RATE_LIMIT_PREFIX}{client}"
        now = time.time()
        window_start = now - settings.RATE_LIMIT_WINDOW_SECONDS

        redis = get_redis()
        pipe = redis.pipeline()
        # Remove entries outside the window
        pipe.zremrangebyscore(key, "-inf", window_start)
        # Count requests still inside it
        pipe.zcard(key)
        # Record this request
        pipe.zadd(key, {f"{now}:{uuid.uuid4().hex[:8]}": now})
        pipe.expire(key, settings.RATE_LIMIT_WINDOW_SECONDS + 1)
        results = await pipe.execute()

        request_count = results[1]  # count before this request

        if request_count >= settings.RATE_LIMIT_MAX_REQUESTS:
            minutes = max(1, settings.RATE_LIMIT_WINDOW_SECONDS // 60)
            return JSONResponse(
                status_code=429,
                content={
                    "status": 429,
                    "error": f"You are doing that too much. Please try again in {minutes} minutes.",
                },
                headers={"Retry-After": str(settings.RATE_LIMIT_WINDOW_SECONDS)},
            )

        return await call_next(request)
