"""
Dependency injection for FastAPI routes.
Provides reusable dependencies for authentication, database sessions, etc.
"""
import logging
from typing import Optional

from fastapi import Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.database import get_db
from app.core.security import extract_token_from_header, decode_token
from app.models.user import User
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Dependency to get the current authenticated user.

    The bearer token is validated locally; its subject identifies the user.
    The local user row is created on first sight and its name/email are
    refreshed from the token claims.

    Args:
        authorization: Authorization header containing Bearer token
        db: Database session

    Returns:
        Local User

    Raises:
        UnauthenticatedError: 401 if the header is missing or the token is invalid

    Example:
        ```python
        @router.get("/protected")
        async def protected_route(current_user: User = Depends(get_current_user)):
            return {"id": current_user.id}
        ```
    """
    token = extract_token_from_header(authorization)
    claims = decode_token(token)

    return await UserService(db).get_or_create_from_identity(claims)


def get_message_limit(
    limit: int = Query(settings.message_page_size, description="Maximum messages to return")
) -> int:
    """
    Dependency for the feed page size.

    Args:
        limit: Requested number of messages

    Returns:
        limit clamped to [1, 100]
    """
    if limit > MAX_PAGE_SIZE:
        return MAX_PAGE_SIZE
    if limit < 1:
        return 1
    return limit
