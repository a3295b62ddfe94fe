"""
JWT helpers.

Tokens are issued by the platform's identity service; this service only
verifies them and reads the caller identity from the claims. Issuing is
kept for local tooling and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from contacthub.core.config import settings


def _secret_key() -> str:
    if not settings.SECRET_KEY:
        raise ValueError(
            "SECRET_KEY not found in environment variables. "
            "Please check your .env file."
        )
    return settings.SECRET_KEY


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Example:
        create_access_token({"user_id": "mentor-42", "name": "Asha", "role": "mentor"})
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})

    return jwt.encode(to_encode, _secret_key(), algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """
    Decode and verify a JWT token.

    Raises:
        JWTError: bad signature, malformed or expired token
    """
    try:
        return jwt.decode(token, _secret_key(), algorithms=[settings.ALGORITHM])
    except JWTError:
        raise
