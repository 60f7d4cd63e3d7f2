"""
Bakery API — FastAPI application entrypoint
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from bakery_api.core.config import get_settings
from bakery_api.core.errors import BakeryError, PersistenceError
from bakery_api.core.redis_client import close_redis
from bakery_api.db.database import open_store
from bakery_api.middleware.auth import JWTAuthMiddleware
from bakery_api.middleware.rate_limiter import SlidingWindowRateLimiter
from bakery_api.api import content, health, images, manage, orders

settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.store = open_store()
    yield
    # Shutdown
    await app.state.store.close()
    await close_redis()


app = FastAPI(
    title="The Recommended Dose Bakery API",
    description="Storefront orders with card payment, catering requests and site content management.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Rate Limiting ─────────────────────────────────────────────────────────────
if settings.RATE_LIMIT_ENABLED:
    app.add_middleware(SlidingWindowRateLimiter)

# ── Auth ──────────────────────────────────────────────────────────────────────
app.add_middleware(JWTAuthMiddleware)

# ── Prometheus Metrics ────────────────────────────────────────────────────────
if settings.METRICS_ENABLED:
    Instrumentator().instrument(app).expose(app, endpoint="/metrics")


# ── Errors ────────────────────────────────────────────────────────────────────
@app.exception_handler(BakeryError)
async def bakery_error_handler(request: Request, exc: BakeryError):
    if isinstance(exc, PersistenceError):
        logger.error("%s %s: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(orders.router)
app.include_router(content.router)
app.include_router(manage.router)
app.include_router(images.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {"service": settings.SERVICE_NAME, "version": settings.SERVICE_VERSION}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("bakery_api.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
