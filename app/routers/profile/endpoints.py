import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.init_db import get_db
from app.common import get_current_user
from app.schemas.profile import ProfileResponse, ProfileUpdate
from app.services.profile_service import get_or_create_profile, upsert_profile

# Configure logger for this module
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["Profile"])

@router.get("", response_model=ProfileResponse)
async def get_profile_api(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Get the current user's profile, creating an empty one on first access.

    Args:
        db: Database session
        current_user: The authenticated user making the request

    Returns:
        ProfileResponse: The user's profile
    """
    return await get_or_create_profile(current_user["uid"], db)

@router.put("", response_model=ProfileResponse)
async def update_profile_api(
    request: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Set the current user's nickname and avatar URL.

    Args:
        request: New nickname and optional avatar URL
        db: Database session
        current_user: The authenticated user making the request

    Returns:
        ProfileResponse: The updated profile
    """
    return await upsert_profile(request, current_user["uid"], db)
