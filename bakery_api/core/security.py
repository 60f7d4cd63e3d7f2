"""
Bakery API — Bearer token verification

Admin tokens are issued by an external identity provider. When
AUTH_JWKS_URI is configured the provider's public key set is fetched (and
cached) and tokens must be RS256-signed; otherwise the shared secret is used.
Audience and issuer are enforced whenever they are configured.
"""
import time
from typing import Any

import httpx
from jose import jwt, JWTError

from bakery_api.core.config import get_settings

settings = get_settings()

_jwks: dict[str, Any] | None = None
_jwks_fetched_at: float = 0.0


async def _get_jwks() -> dict[str, Any]:
    global _jwks, _jwks_fetched_at
    now = time.monotonic()
    if _jwks is None or now - _jwks_fetched_at > settings.JWKS_CACHE_SECONDS:
        try:
            async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
                r = await client.get(settings.AUTH_JWKS_URI)
                r.raise_for_status()
        except httpx.HTTPError as exc:
            raise JWTError(f"Unable to fetch signing keys: {exc}") from exc
        try:
            _jwks = r.json()
        except ValueError as exc:
            raise JWTError("Signing key set is not valid JSON") from exc
        _jwks_fetched_at = now
    return _jwks


async def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT. Raises JWTError on failure."""
    if settings.AUTH_JWKS_URI:
        key: Any = await _get_jwks()
        algorithms = ["RS256"]
    else:
        key = settings.JWT_SECRET_KEY
        algorithms = [settings.JWT_ALGORITHM]

    return jwt.decode(
        token,
        key,
        algorithms=algorithms,
        audience=settings.AUTH_AUDIENCE or None,
        issuer=settings.AUTH_ISSUER or None,
    )
