"""
File API endpoints.
Issues upload targets for direct client-to-OSS uploads.
"""
from fastapi import APIRouter, Depends

from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.file import UploadUrlRequest, UploadUrlResponse
from app.services.storage_service import storage_service

router = APIRouter()


@router.post(
    "/upload-url",
    response_model=UploadUrlResponse,
    summary="Get an upload URL",
    description="Returns a signed PUT URL and the file key to pass to /messages/file or /users/me/profile."
)
async def create_upload_url(
    request_data: UploadUrlRequest,
    current_user: User = Depends(get_current_user)
):
    """
    Step one of the two-step upload:

    1. Call this endpoint to get ``upload_url`` and ``file_key``
    2. PUT the file bytes to ``upload_url``
    3. Send ``file_key`` with the message or profile update
    """
    return storage_service.generate_upload_url(current_user.id, request_data.file_name)
