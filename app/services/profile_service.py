import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ApiError, ErrorCode
from app.models import Profile
from app.schemas.profile import ProfileUpdate

logger = logging.getLogger(__name__)

async def _insert_profile(profile: Profile, db: AsyncSession) -> Profile:
    """
    Commit a new profile row. If another request created the same
    profile first, roll back and return the stored row instead.
    """
    db.add(profile)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info(f"Profile {profile.id} was created concurrently, reloading")
        result = await db.execute(select(Profile).where(Profile.id == profile.id))
        return result.scalar_one()
    await db.refresh(profile)
    return profile

async def get_or_create_profile(user_id: str, db: AsyncSession) -> Profile:
    """
    Retrieve the user's profile, creating an empty one on first access.

    Args:
        user_id: ID of the authenticated user
        db: Async database session

    Returns:
        Profile: The stored or newly created profile
    """
    try:
        result = await db.execute(select(Profile).where(Profile.id == user_id))
        profile = result.scalar_one_or_none()
        if profile is not None:
            return profile

        logger.info(f"Initializing profile for user {user_id}")
        return await _insert_profile(Profile(id=user_id, nickname=""), db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"Failed to load profile for user {user_id}")
        raise ApiError(500, ErrorCode.PROFILE_FETCH_ERROR, str(e))

async def upsert_profile(request: ProfileUpdate, user_id: str, db: AsyncSession) -> Profile:
    """
    Create or replace the user's nickname and avatar URL.

    Args:
        request: ProfileUpdate with the new values
        user_id: ID of the authenticated user
        db: Async database session

    Returns:
        Profile: The updated profile
    """
    logger.info(f"Updating profile for user {user_id}")
    try:
        profile = await db.get(Profile, user_id)
        if profile is None:
            profile = await _insert_profile(Profile(id=user_id, nickname=""), db)
        profile.nickname = request.nickname
        profile.avatar_url = request.avatar_url
        await db.commit()
        await db.refresh(profile)
        return profile
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"Failed to update profile for user {user_id}")
        raise ApiError(500, ErrorCode.PROFILE_UPDATE_ERROR, str(e))
