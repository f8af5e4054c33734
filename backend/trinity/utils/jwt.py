"""
JWT token utilities for authentication.

Tokens carry the user_id in the standard "sub" claim.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID
from jose import JWTError, jwt
from pydantic_settings import BaseSettings


class JWTSettings(BaseSettings):
    """JWT configuration settings."""

    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    class Config:
        env_file = ".env"
        extra = "ignore"


jwt_settings = JWTSettings()


def create_access_token(user_id: UUID) -> str:
    """Issue a signed access token for a user."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "exp": now + timedelta(minutes=jwt_settings.access_token_expire_minutes),
        "iat": now,
    }
    return jwt.encode(
        payload, jwt_settings.jwt_secret_key, algorithm=jwt_settings.jwt_algorithm
    )


def decode_access_token(token: str) -> Optional[UUID]:
    """
    Decode and validate a JWT access token.

    Returns:
        user_id (UUID) if token is valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token, jwt_settings.jwt_secret_key, algorithms=[jwt_settings.jwt_algorithm]
        )
        subject: Optional[str] = payload.get("sub")
        if subject is None:
            return None
        return UUID(subject)
    except (JWTError, ValueError):
        return None
