"""
Friend API endpoints.
Provides friend requests, friend lists and blocking.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.relationship import (
    BlockCreate,
    FriendRequestCreate,
    FriendRequestRespond,
    PendingRequestResponse,
    RelationshipResponse
)
from app.schemas.user import UserSummaryResponse
from app.services.relationship_service import RelationshipService

router = APIRouter()


@router.post(
    "/requests",
    response_model=RelationshipResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a friend request"
)
async def send_friend_request(
    request_data: FriendRequestCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Send a friend request.

    - **target_user_id**: User to befriend

    Returns 409 if a request is already pending or the users are already friends.
    """
    service = RelationshipService(db)
    return await service.send_friend_request(current_user.id, request_data.target_user_id)


@router.get(
    "/requests",
    response_model=List[PendingRequestResponse],
    summary="List incoming friend requests"
)
async def list_pending_requests(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = RelationshipService(db)
    return await service.list_pending_requests(current_user.id)


@router.post(
    "/requests/{relationship_id}/respond",
    response_model=RelationshipResponse,
    summary="Accept or reject a friend request"
)
async def respond_to_friend_request(
    relationship_id: str,
    response_data: FriendRequestRespond,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Respond to an incoming friend request.

    Only the request's target may respond. Accepting creates the reciprocal
    friendship.
    """
    service = RelationshipService(db)
    return await service.respond_to_friend_request(
        current_user.id,
        relationship_id,
        response_data.accept
    )


@router.get(
    "/",
    response_model=List[UserSummaryResponse],
    summary="List friends"
)
async def list_friends(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = RelationshipService(db)
    return await service.list_friends(current_user.id)


@router.post(
    "/blocks",
    response_model=RelationshipResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Block a user",
    description="Replaces any existing relationship from the caller to the target with a block."
)
async def block_user(
    block_data: BlockCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = RelationshipService(db)
    return await service.block_user(current_user.id, block_data.target_user_id)


@router.get(
    "/blocks",
    response_model=List[UserSummaryResponse],
    summary="List blocked users"
)
async def list_blocked_users(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = RelationshipService(db)
    return await service.list_blocked_users(current_user.id)
