import logging
from fastapi import APIRouter, Depends, Query
from app.common import get_current_user
from app.schemas.storage import SignedUploadResponse
from app.services.storage_service import create_avatar_upload_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/storage", tags=["Storage"])

@router.get("/avatar/signed-upload", response_model=SignedUploadResponse)
async def avatar_signed_upload_api(
    filename: str = Query(..., min_length=1, max_length=255, pattern=r"^[^\\/]+$"),
    current_user: dict = Depends(get_current_user)
):
    """
    Get a presigned URL for uploading a new avatar image.

    Args:
        filename: Name of the file being uploaded; may not contain slashes
        current_user: The authenticated user making the request

    Returns:
        SignedUploadResponse: Upload URL, object path and public URL
    """
    return create_avatar_upload_url(filename, current_user["uid"])
