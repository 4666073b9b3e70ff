"""
Message API routes.
Provides endpoints for sending, editing, deleting and reading direct messages.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.dependencies import get_current_user, get_message_limit
from app.models.user import User
from app.schemas.message import (
    FileMessageCreate,
    MessageCreate,
    MessageResponse,
    MessageUpdate
)
from app.services.message_service import MessageService

router = APIRouter()


@router.get(
    "/direct/{other_user_id}",
    response_model=List[MessageResponse],
    summary="Get direct messages",
    description="Most recent messages exchanged with another user, oldest first."
)
async def list_direct_messages(
    other_user_id: str,
    limit: int = Depends(get_message_limit),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = MessageService(db)
    return await service.list_direct_messages(current_user.id, other_user_id, limit)


@router.post(
    "/",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a new message",
    description="Send a text message or a reply to a group or a direct recipient."
)
async def send_message(
    message_data: MessageCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Send a new message.

    - **content**: Message text
    - **group_id**: Target group (members only)
    - **recipient_id**: Direct recipient (fails if they blocked you)
    - **reply_to_id**: Optional message in the same conversation being replied to
    """
    service = MessageService(db)
    return await service.send_message(
        author_id=current_user.id,
        content=message_data.content,
        group_id=message_data.group_id,
        recipient_id=message_data.recipient_id,
        reply_to_id=message_data.reply_to_id
    )


@router.post(
    "/file",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a file message",
    description="Send an uploaded image (jpeg, png, gif) to a group or a direct recipient."
)
async def send_file_message(
    message_data: FileMessageCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = MessageService(db)
    return await service.send_file_message(
        author_id=current_user.id,
        file_key=message_data.file_key,
        file_name=message_data.file_name,
        file_type=message_data.file_type,
        group_id=message_data.group_id,
        recipient_id=message_data.recipient_id
    )


@router.put(
    "/{message_id}",
    response_model=MessageResponse,
    summary="Edit a message",
    description="Edit your own text or reply message. File messages cannot be edited."
)
async def edit_message(
    message_id: str,
    message_data: MessageUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = MessageService(db)
    return await service.edit_message(current_user.id, message_id, message_data.content)


@router.delete(
    "/{message_id}",
    response_model=MessageResponse,
    summary="Delete a message",
    description="Soft-delete your own message. It stays in the feed as a placeholder."
)
async def delete_message(
    message_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = MessageService(db)
    return await service.delete_message(current_user.id, message_id)
