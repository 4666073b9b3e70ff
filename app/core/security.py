"""
Security utilities for authentication.
Handles bearer token extraction and JWT validation for the identity provider.
"""
import jwt
from datetime import timedelta
from typing import Optional, Dict, Any

from app.config import settings
from app.core.exceptions import UnauthenticatedError
from app.utils.datetime_utils import utc_now


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create JWT access token.

    The identity provider issues tokens in production; this is used by
    tests and local tooling to mint compatible tokens.

    Args:
        data: Payload data to encode
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token

    Example:
        ```python
        token = create_access_token(
            data={"sub": "auth|123", "name": "Alice", "email": "alice@example.com"},
            expires_delta=timedelta(hours=24)
        )
        ```
    """
    to_encode = data.copy()

    now = utc_now()
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(hours=settings.jwt_expiration_hours)

    to_encode.update({"exp": expire, "iat": now})

    return jwt.encode(
        to_encode,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm
    )


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate JWT token.

    Args:
        token: JWT token string

    Returns:
        Identity claims: ``subject``, ``name``, ``email`` plus the raw payload

    Raises:
        UnauthenticatedError: If token is invalid, expired or has no subject
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("Token has expired")
    except jwt.InvalidTokenError:
        raise UnauthenticatedError("Invalid token")

    subject = payload.get("sub") or payload.get("id")
    if not subject:
        raise UnauthenticatedError("Token missing subject claim")

    return {
        **payload,
        "subject": str(subject),
        "name": payload.get("name"),
        "email": payload.get("email"),
    }


def extract_token_from_header(authorization: str) -> str:
    """
    Extract JWT token from Authorization header.

    Args:
        authorization: Authorization header value (e.g., "Bearer <token>")

    Returns:
        Extracted token

    Raises:
        UnauthenticatedError: If header format is invalid
    """
    if not authorization:
        raise UnauthenticatedError("Missing authorization header")

    parts = authorization.split()

    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthenticatedError("Invalid authorization header format")

    return parts[1]
