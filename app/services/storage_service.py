import boto3
import logging

from botocore.exceptions import BotoCoreError, ClientError
from app.config import settings
from app.core.errors import ApiError, ErrorCode
from app.schemas.storage import SignedUploadResponse
from app.utils.time_utils import epoch_millis

logger = logging.getLogger(__name__)

def get_avatar_public_url(path: str) -> str:
    """Public URL an avatar stored under ``path`` is served from."""
    if settings.avatar_public_base_url:
        return f"{settings.avatar_public_base_url.rstrip('/')}/{path}"
    return f"https://{settings.avatar_bucket}.s3.{settings.aws_region}.amazonaws.com/{path}"

def create_avatar_upload_url(filename: str, user_id: str) -> SignedUploadResponse:
    """
    Generate a signed S3 URL the client can PUT an avatar image to.

    Args:
        filename: Client file name, already checked to contain no path separators
        user_id: ID of the uploading user; used as the key prefix

    Returns:
        SignedUploadResponse with the upload URL and the eventual public URL

    Raises:
        ApiError: If the URL cannot be signed
    """
    bucket = settings.avatar_bucket
    path = f"{user_id}/{epoch_millis()}-{filename}"
    expiration = settings.signed_upload_expiration

    s3 = boto3.client(
        's3',
        region_name=settings.aws_region
    )

    try:
        url = s3.generate_presigned_url(
            'put_object',
            Params={
                'Bucket': bucket,
                'Key': path
            },
            ExpiresIn=expiration
        )
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Error generating signed upload URL for {path}: {e}")
        raise ApiError(500, ErrorCode.STORAGE_SIGN_ERROR, str(e))

    logger.info(f"Signed avatar upload for user {user_id} at {bucket}/{path}")
    return SignedUploadResponse(
        bucket=bucket,
        path=path,
        upload_url=url,
        public_url=get_avatar_public_url(path),
        expires_in=expiration,
    )
