from app.schemas.common import CamelModel

class SignedUploadResponse(CamelModel):
    """
    Attributes:
        bucket: Bucket the object will be written to
        path: Object key, "{uid}/{epoch_ms}-{filename}"
        upload_url: Presigned URL the client PUTs the file body to
        public_url: URL the stored avatar is served from
        expires_in: Seconds until upload_url stops working
    """
    bucket: str
    path: str
    upload_url: str
    public_url: str
    expires_in: int
