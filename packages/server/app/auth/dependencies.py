"""FastAPI authentication dependencies.

``get_current_user`` resolves the bearer token to the owning user that every
project, column and task lookup is scoped to.
"""

from dataclasses import dataclass
from typing import Optional

import jwt as pyjwt
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.config import auth_settings
from app.auth.jwt import decode_token, TOKEN_TYPE_ACCESS
from app.database import get_async_session
from app.logging_config import get_logger
from app.models.auth import User
from app.utils import now_ms

logger = get_logger(__name__)

# Owner of every project when AUTH_ENABLED=false
LOCAL_USER_ID = "usr_local"
LOCAL_USER_EMAIL = "local@taskboard.invalid"


@dataclass
class AuthUser:
    """The authenticated caller."""

    id: str
    email: str
    display_name: Optional[str]


def _extract_bearer_token(request: Request) -> Optional[str]:
    """Extract the Bearer token from the Authorization header."""
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip()
    return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _local_user(session: AsyncSession) -> AuthUser:
    """Return the single local user, creating its row on first use."""
    user = await session.get(User, LOCAL_USER_ID)
    if user is None:
        now = now_ms()
        user = User(
            id=LOCAL_USER_ID,
            email=LOCAL_USER_EMAIL,
            display_name="Local",
            password_hash="!",
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        session.add(user)
        await session.commit()
        logger.info("Created local user for unauthenticated mode")
    return AuthUser(id=user.id, email=user.email, display_name=user.display_name)


async def get_current_user(
    request: Request,
    session: AsyncSession = Depends(get_async_session),
) -> AuthUser:
    """Resolve the current user from a JWT access token.

    Raises 401 if no valid credential is provided.
    """
    if not auth_settings.enabled:
        return await _local_user(session)

    token = _extract_bearer_token(request)
    if not token:
        raise _unauthorized("Not authenticated")

    try:
        payload = decode_token(token)
    except pyjwt.ExpiredSignatureError:
        raise _unauthorized("Token expired")
    except pyjwt.InvalidTokenError:
        raise _unauthorized("Invalid or expired token")

    if payload.get("type") != TOKEN_TYPE_ACCESS or not payload.get("sub"):
        raise _unauthorized("Invalid token type")

    result = await session.execute(select(User).where(User.id == payload["sub"]))
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        raise _unauthorized("User not found or inactive")

    return AuthUser(id=user.id, email=user.email, display_name=user.display_name)
