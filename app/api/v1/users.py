"""
User API endpoints.
Provides the current user's profile and nickname search.
"""
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.user import CurrentUserResponse, ProfileUpdate, UserSummaryResponse
from app.services.user_service import UserService

router = APIRouter()


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Get current user",
    description="Get the authenticated user with nickname and profile photo."
)
async def get_me(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get current authenticated user profile.

    **Authentication**: Required (Bearer token)
    """
    service = UserService(db)
    return await service.get_current_user(current_user.id)


@router.put(
    "/me/profile",
    response_model=CurrentUserResponse,
    summary="Update profile",
    description="Set nickname and/or profile photo. The profile is created on first update."
)
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update the caller's profile.

    - **nickname**: New nickname (omit to keep)
    - **profile_photo_key**: Key from POST /files/upload-url (omit to keep)
    """
    service = UserService(db)
    return await service.update_profile(
        user_id=current_user.id,
        nickname=profile_data.nickname,
        profile_photo_key=profile_data.profile_photo_key
    )


@router.get(
    "/search",
    response_model=List[UserSummaryResponse],
    summary="Search users",
    description="Find users by exact nickname (max 10 results, never the caller)."
)
async def search_users(
    q: str = Query(..., min_length=1, max_length=100, description="Nickname to match"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = UserService(db)
    return await service.search_users(current_user.id, q)
