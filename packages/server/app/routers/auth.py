"""Authentication API routes.

Groups:
  - Registration and login (public)
  - Current user (authenticated)
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.models.auth import User
from app.auth.config import auth_settings
from app.auth.jwt import create_access_token
from app.auth.passwords import hash_password, verify_password
from app.auth.dependencies import get_current_user, AuthUser
from app.logging_config import get_logger
from app.utils import gen_id, now_ms

logger = get_logger(__name__)

router = APIRouter()


# ─── Helpers ──────────────────────────────────────────────────────────────────


def _issue_tokens(user: User) -> dict:
    """Create an access token for ``user``."""
    access_token = create_access_token(user_id=user.id, email=user.email)
    return {
        "accessToken": access_token,
        "tokenType": "Bearer",
        "expiresIn": auth_settings.access_token_ttl_seconds,
        "user": {
            "id": user.id,
            "email": user.email,
            "displayName": user.display_name,
        },
    }


def _normalize_email(value: str) -> str:
    value = value.lower().strip()
    if "@" not in value or value.startswith("@") or value.endswith("@"):
        raise ValueError("invalid email address")
    return value


# ─── Schemas ──────────────────────────────────────────────────────────────────


class RegisterRequest(BaseModel):
    email: str
    password: str = Field(min_length=8)
    displayName: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _normalize_email(v)


class LoginRequest(BaseModel):
    email: str
    password: str


# ═════════════════════════════════════════════════════════════════════════════
#  PUBLIC ENDPOINTS (no auth required)
# ═════════════════════════════════════════════════════════════════════════════


@router.post("/register", status_code=201)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(get_async_session),
):
    """Create a user account and log it in."""
    result = await session.execute(select(User).where(User.email == body.email))
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    now = now_ms()
    user = User(
        id=gen_id("usr_"),
        email=body.email,
        display_name=body.displayName or body.email.split("@")[0],
        password_hash=hash_password(body.password),
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    session.add(user)
    await session.commit()
    logger.info(f"Registered user {user.id}")

    return _issue_tokens(user)


@router.post("/login")
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_async_session),
):
    """Email/password login."""
    result = await session.execute(
        select(User).where(User.email == body.email.lower().strip())
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(body.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is disabled",
        )

    return _issue_tokens(user)


# ═════════════════════════════════════════════════════════════════════════════
#  AUTHENTICATED ENDPOINTS
# ═════════════════════════════════════════════════════════════════════════════


@router.get("/me")
async def get_me(user: AuthUser = Depends(get_current_user)):
    """Get the current authenticated user's info."""
    return {
        "id": user.id,
        "email": user.email,
        "displayName": user.display_name,
    }
