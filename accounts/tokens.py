"""JWT issuance and verification."""

from datetime import datetime, timezone
from typing import Any

from django.conf import settings
from jose import JWTError, jwt

from core.exceptions import AuthenticationError

TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"


def _encode(user, token_type: str, lifetime) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.pk),
        "role": user.role,
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(user) -> str:
    return _encode(user, TOKEN_TYPE_ACCESS, settings.JWT_ACCESS_TOKEN_LIFETIME)


def create_refresh_token(user) -> str:
    return _encode(user, TOKEN_TYPE_REFRESH, settings.JWT_REFRESH_TOKEN_LIFETIME)


def issue_tokens(user) -> dict[str, str]:
    return {
        "accessToken": create_access_token(user),
        "refreshToken": create_refresh_token(user),
    }


def decode_token(token: str, expected_type: str = TOKEN_TYPE_ACCESS) -> dict[str, Any]:
    """
    Decode and validate a JWT.

    Raises:
        AuthenticationError: If the token is malformed, expired, or of the
            wrong type
    """
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        raise AuthenticationError("Invalid or expired token")

    if payload.get("type") != expected_type:
        raise AuthenticationError("Invalid token type")

    return payload
