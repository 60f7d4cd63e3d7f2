"""
Bakery API — Configuration
All settings are read from environment variables (or .env file).
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ── Service ──────────────────────────────────────────────
    SERVICE_NAME: str = "bakery-api"
    SERVICE_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 4000
    LOG_LEVEL: str = "INFO"

    # ── MongoDB ───────────────────────────────────────────────
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "therecdose"
    MONGO_TIMEOUT_MS: int = 5000

    # ── Redis ─────────────────────────────────────────────────
    REDIS_HOST: str = "redis"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str = ""

    @property
    def redis_url(self) -> str:
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    # ── Rate Limiting ─────────────────────────────────────────
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MAX_REQUESTS: int = 60
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # ── Auth (bearer JWT) ─────────────────────────────────────
    # With AUTH_JWKS_URI set, tokens are RS256-verified against the issuer's
    # key set; otherwise the shared secret below is used.
    AUTH_JWKS_URI: str = ""
    AUTH_AUDIENCE: str = ""
    AUTH_ISSUER: str = ""
    JWKS_CACHE_SECONDS: int = 600
    JWT_SECRET_KEY: str = "CHANGE_ME_IN_PRODUCTION"
    JWT_ALGORITHM: str = "HS256"

    # ── Stripe ────────────────────────────────────────────────
    STRIPE_SECRET_KEY: str = ""
    STRIPE_API_BASE: str = "https://api.stripe.com/v1"
    PAYMENT_CURRENCY: str = "usd"
    PAYMENT_DESCRIPTION: str = "The Recommended Dose"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # ── S3 ────────────────────────────────────────────────────
    S3_KEY: str = ""
    S3_SECRET: str = ""
    BUCKET_REGION: str = "us-east-1"
    BUCKET_NAME: str = "therecdose"
    SIGNED_URL_EXPIRES_SECONDS: int = 900

    # ── Observability ─────────────────────────────────────────
    METRICS_ENABLED: bool = True
    HEALTH_CHECK_TIMEOUT: float = 5.0


@lru_cache()
def get_settings() -> Settings:
    return Settings()
