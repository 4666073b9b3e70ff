"""
Group API endpoints.
Provides group creation, roster management and the group message feed.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.dependencies import get_current_user, get_message_limit
from app.models.user import User
from app.schemas.group import (
    GroupCreate,
    GroupMemberAdd,
    GroupMemberResponse,
    GroupMembershipResponse,
    GroupResponse,
    SuccessResponse
)
from app.schemas.message import MessageResponse
from app.schemas.user import UserSummaryResponse
from app.services.group_service import GroupService
from app.services.message_service import MessageService

router = APIRouter()


@router.post(
    "/",
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a group",
    description="Create a group. The creator becomes its first admin."
)
async def create_group(
    group_data: GroupCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a new group.

    - **name**: Group name
    - **description**: Optional description
    - **is_private**: Privacy flag
    """
    service = GroupService(db)
    return await service.create_group(
        creator_id=current_user.id,
        name=group_data.name,
        description=group_data.description,
        is_private=group_data.is_private
    )


@router.get(
    "/",
    response_model=List[GroupResponse],
    summary="Get user's groups",
    description="Groups the caller belongs to, with the caller's role and member count."
)
async def list_user_groups(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = GroupService(db)
    return await service.list_user_groups(current_user.id)


@router.get(
    "/{group_id}",
    response_model=GroupResponse,
    summary="Get a group by ID"
)
async def get_group(
    group_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = GroupService(db)
    return await service.get_group(current_user.id, group_id)


@router.get(
    "/{group_id}/members",
    response_model=List[GroupMemberResponse],
    summary="List group members"
)
async def list_members(
    group_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = GroupService(db)
    return await service.list_members(current_user.id, group_id)


@router.post(
    "/{group_id}/members",
    response_model=GroupMembershipResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a member",
    description="Add one of your friends to the group. Only admins can add members."
)
async def add_member(
    group_id: str,
    member_data: GroupMemberAdd,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = GroupService(db)
    return await service.add_member(current_user.id, group_id, member_data.user_id)


@router.delete(
    "/{group_id}/members/{user_id}",
    response_model=SuccessResponse,
    summary="Remove a member",
    description="Remove a member from the group. Only admins can remove; the creator cannot be removed."
)
async def remove_member(
    group_id: str,
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = GroupService(db)
    await service.remove_member(current_user.id, group_id, user_id)
    return {"success": True, "message": "Member removed"}


@router.post(
    "/{group_id}/leave",
    response_model=SuccessResponse,
    summary="Leave a group",
    description="Leave the group. The creator cannot leave."
)
async def leave_group(
    group_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = GroupService(db)
    await service.leave_group(current_user.id, group_id)
    return {"success": True, "message": "Left group"}


@router.get(
    "/{group_id}/addable-friends",
    response_model=List[UserSummaryResponse],
    summary="Friends who can be added",
    description="The caller's friends who are not yet members of the group."
)
async def list_addable_friends(
    group_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = GroupService(db)
    return await service.list_addable_friends(current_user.id, group_id)


@router.get(
    "/{group_id}/messages",
    response_model=List[MessageResponse],
    summary="Get group messages",
    description="Most recent messages in the group, oldest first. Members only."
)
async def list_group_messages(
    group_id: str,
    limit: int = Depends(get_message_limit),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get the group feed.

    - **limit**: Number of messages (1-100, default 50)
    """
    service = MessageService(db)
    return await service.list_group_messages(current_user.id, group_id, limit)
