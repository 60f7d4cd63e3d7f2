"""
Bakery API — Redis connection for the rate limiter

Only the sliding-window counters live here, so a single lazily created
connection pool is shared by the middleware and the health check. Commands
are bounded by the health-check timeout so a stalled Redis slows requests
down by at most that much.
"""
import redis.asyncio as aioredis
from bakery_api.core.config import get_settings

settings = get_settings()

_redis_client: aioredis.Redis | None = None


def get_redis() -> aioredis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = aioredis.from_url(
            settings.redis_url,
            decode_responses=True,
            client_name=settings.SERVICE_NAME,
            socket_connect_timeout=settings.HEALTH_CHECK_TIMEOUT,
            socket_timeout=settings.HEALTH_CHECK_TIMEOUT,
        )
    return _redis_client


async def close_redis() -> None:
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
