import logging
from typing import List

from pydantic import ValidationError
from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.default_categories import DEFAULT_CATEGORIES
from app.core.errors import ApiError, ErrorCode, validation_details
from app.models import CounselingCategory
from app.schemas.counseling import CategoryListResponse, CategoryResponse, CreateCategoryRequest

# Configure logger for this module
logger = logging.getLogger(__name__)

def map_category_row(row: CounselingCategory) -> CategoryResponse:
    """
    Validate a stored category row and map it to its API shape.

    Raises:
        ValidationError: If the stored row does not match the schema
    """
    return CategoryResponse.model_validate({
        "id": row.id,
        "name": row.name,
        "description": row.description,
        "icon": row.icon,
        "color": row.color,
        "initial_questions": row.initial_questions or [],
        "is_custom": row.is_custom,
        "user_id": row.user_id,
        "created_at": row.created_at,
    })

def _map_category_rows(rows: List[CounselingCategory]) -> List[CategoryResponse]:
    categories = []
    for row in rows:
        try:
            categories.append(map_category_row(row))
        except ValidationError as e:
            logger.warning(f"Skipping invalid category row {row.id}: {e.error_count()} errors")
    return categories

async def list_categories(user_id: str, db: AsyncSession) -> CategoryListResponse:
    """
    List the built-in categories plus the user's custom ones, each ordered by name.

    Args:
        user_id: ID of the requesting user
        db: Async database session

    Returns:
        CategoryListResponse with default and custom categories

    Raises:
        ApiError: If the categories cannot be read
    """
    logger.info(f"Listing categories for user {user_id}")
    try:
        default_result = await db.execute(
            select(CounselingCategory)
            .where(CounselingCategory.is_custom.is_(False))
            .order_by(CounselingCategory.name)
        )
        custom_result = await db.execute(
            select(CounselingCategory)
            .where(
                CounselingCategory.is_custom.is_(True),
                CounselingCategory.user_id == user_id
            )
            .order_by(CounselingCategory.name)
        )
    except SQLAlchemyError as e:
        logger.exception(f"Failed to fetch categories for user {user_id}")
        raise ApiError(500, ErrorCode.CATEGORY_FETCH_ERROR, str(e))

    return CategoryListResponse(
        default_categories=_map_category_rows(default_result.scalars().all()),
        custom_categories=_map_category_rows(custom_result.scalars().all()),
    )

async def get_visible_category(category_id: str, user_id: str, db: AsyncSession) -> CounselingCategory:
    """
    Fetch a category the user may use: a built-in one or one of their own.

    Raises:
        ApiError: 404 if no such category is visible to the user
    """
    try:
        result = await db.execute(
            select(CounselingCategory).where(
                CounselingCategory.id == category_id,
                or_(
                    CounselingCategory.is_custom.is_(False),
                    CounselingCategory.user_id == user_id
                )
            )
        )
    except SQLAlchemyError as e:
        logger.exception(f"Failed to fetch category {category_id}")
        raise ApiError(500, ErrorCode.CATEGORY_FETCH_ERROR, str(e))

    category = result.scalar_one_or_none()
    if category is None:
        logger.warning(f"Category not found: {category_id} for user: {user_id}")
        raise ApiError(404, ErrorCode.CATEGORY_NOT_FOUND)
    return category

async def get_category(category_id: str, user_id: str, db: AsyncSession) -> CategoryResponse:
    category = await get_visible_category(category_id, user_id, db)
    try:
        return map_category_row(category)
    except ValidationError as e:
        logger.error(f"Stored category {category_id} failed validation")
        raise ApiError(500, ErrorCode.CATEGORY_VALIDATION_ERROR, details=validation_details(e))

async def create_custom_category(request: CreateCategoryRequest, user_id: str, db: AsyncSession) -> CategoryResponse:
    """
    Create a custom category owned by the user.

    Args:
        request: Validated category payload
        user_id: ID of the owning user
        db: Async database session

    Returns:
        The created category
    """
    logger.info(f"Creating custom category '{request.name}' for user {user_id}")
    category = CounselingCategory(
        name=request.name,
        description=request.description,
        icon=request.icon,
        color=request.color,
        initial_questions=[
            q.model_dump(mode="json", by_alias=True, exclude_none=True)
            for q in request.initial_questions
        ],
        is_custom=True,
        user_id=user_id,
    )
    try:
        db.add(category)
        await db.commit()
        await db.refresh(category)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"Failed to create category for user {user_id}")
        raise ApiError(500, ErrorCode.CATEGORY_CREATE_ERROR, str(e))

    try:
        return map_category_row(category)
    except ValidationError as e:
        raise ApiError(500, ErrorCode.CATEGORY_VALIDATION_ERROR, "Created category validation failed", validation_details(e))

async def seed_default_categories(db: AsyncSession) -> int:
    """
    Insert any built-in category that is missing, matched by name.

    Returns:
        Number of categories inserted
    """
    result = await db.execute(
        select(CounselingCategory.name).where(CounselingCategory.is_custom.is_(False))
    )
    existing = set(result.scalars().all())

    created = 0
    for data in DEFAULT_CATEGORIES:
        if data["name"] in existing:
            continue
        db.add(CounselingCategory(is_custom=False, user_id=None, **data))
        created += 1

    if created:
        await db.commit()
        logger.info(f"Seeded {created} default categories")
    return created
