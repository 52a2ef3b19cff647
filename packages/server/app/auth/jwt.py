"""JWT token creation and validation."""

import uuid
from datetime import datetime, timezone, timedelta

import jwt as pyjwt

from app.auth.config import auth_settings


TOKEN_TYPE_ACCESS = "access"


def create_access_token(user_id: str, email: str) -> str:
    """Create a signed access token for ``user_id``."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "type": TOKEN_TYPE_ACCESS,
        "iat": now,
        "exp": now + timedelta(seconds=auth_settings.access_token_ttl_seconds),
        "jti": uuid.uuid4().hex,
    }
    return pyjwt.encode(payload, auth_settings.secret_key, algorithm="HS256")


def decode_token(token: str) -> dict:
    """Decode and validate a JWT.

    Raises jwt.ExpiredSignatureError, jwt.InvalidTokenError on failure.
    """
    return pyjwt.decode(token, auth_settings.secret_key, algorithms=["HS256"])
