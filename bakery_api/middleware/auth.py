"""
Bakery API — JWT Authentication Middleware
Guards the admin surface (/api/manage/* and the image routes); returns 401
on a missing or invalid bearer token. Storefront routes stay public.
"""
import logging
import re

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from jose import JWTError

from bakery_api.core.security import decode_token

logger = logging.getLogger(__name__)

PROTECTED_PREFIXES = ("/api/manage/",)
PROTECTED_PATTERNS = (re.compile(r"^/api/[^/]+/(uploadImage|delImage)/[^/]+/?$"),)


def requires_auth(path: str) -> bool:
    if path.startswith(PROTECTED_PREFIXES):
        return True
    return any(p.match(path) for p in PROTECTED_PATTERNS)


class JWTAuthMiddleware(BaseHTTPMiddleware):
    """
    Validates the Bearer token on admin paths and attaches the decoded claims
    to request.state.user.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "OPTIONS" or not requires_auth(request.url.path):
            return await call_next(request)

        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return JSONResponse(
                status_code=401,
                content={"msg": "Invalid token"},
                headers={"WWW-Authenticate": "Bearer"},
            )

        token = auth_header.split(" ", 1)[1]
        try:
            request.state.user = await decode_token(token)
        except JWTError as exc:
            logger.warning("Request without valid token: %s", exc)
            return JSONResponse(
                status_code=401,
                content={"msg": "Invalid token"},
                headers={"WWW-Authenticate": "Bearer"},
            )

        return await call_next(request)
