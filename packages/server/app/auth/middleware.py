"""Auth middleware: global route protection with path allowlist.

Applied as Starlette middleware so it runs before FastAPI dependency
injection and covers every route without per-router Depends().
"""

import re

import jwt as pyjwt
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.auth.config import auth_settings
from app.auth.dependencies import _extract_bearer_token
from app.auth.jwt import decode_token, TOKEN_TYPE_ACCESS
from app.logging_config import get_logger

logger = get_logger(__name__)

# Paths that never require authentication.
PUBLIC_PATH_PATTERNS: list[re.Pattern] = [
    # Health check
    re.compile(r"^/v1/status$"),
    # Auth endpoints
    re.compile(r"^/v1/auth/register$"),
    re.compile(r"^/v1/auth/login$"),
    # OpenAPI docs (useful during development)
    re.compile(r"^/docs$"),
    re.compile(r"^/redoc$"),
    re.compile(r"^/openapi\.json$"),
]


def _is_public_path(path: str) -> bool:
    """Return True if the path matches a public pattern."""
    for pattern in PUBLIC_PATH_PATTERNS:
        if pattern.match(path):
            return True
    return False


def _reject(detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content={"detail": detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthMiddleware(BaseHTTPMiddleware):
    """Reject unauthenticated requests to non-public paths.

    This is a fast pre-check on the JWT signature and type. Loading the user
    row happens in the FastAPI dependency layer (get_current_user).

    When AUTH_ENABLED=false, this middleware is a no-op.
    """

    async def dispatch(self, request: Request, call_next):
        if not auth_settings.enabled:
            return await call_next(request)

        if _is_public_path(request.url.path):
            return await call_next(request)

        # Allow CORS preflight
        if request.method == "OPTIONS":
            return await call_next(request)

        token = _extract_bearer_token(request)
        if not token:
            return _reject("Not authenticated")

        try:
            payload = decode_token(token)
        except pyjwt.ExpiredSignatureError:
            return _reject("Token expired")
        except pyjwt.InvalidTokenError:
            logger.debug(f"Rejected invalid token for {request.url.path}")
            return _reject("Invalid or expired token")

        if payload.get("type") != TOKEN_TYPE_ACCESS:
            return _reject("Invalid token type")

        return await call_next(request)
