import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.common import get_current_user
from app.init_db import get_db
from app.schemas.counseling import (
    CategoryListResponse,
    CategoryResponse,
    CreateCategoryRequest,
    CreateMessageRequest,
    CreateSessionRequest,
    DeleteSessionResponse,
    MessageListResponse,
    MessageResponse,
    SessionListResponse,
    SessionResponse,
    SessionStatsResponse,
    SessionStatus,
    UpdateSessionRequest,
)
from app.services.category_service import create_custom_category, get_category, list_categories
from app.services.message_service import create_message, list_messages, toggle_bookmark
from app.services.session_service import (
    archive_session,
    create_session,
    get_session,
    get_session_stats,
    list_sessions,
    update_session,
)

# Configure logger for counseling endpoints
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/counseling", tags=["Counseling"])


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

@router.get("/categories", response_model=CategoryListResponse)
async def list_categories_api(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """List built-in categories and the current user's custom categories."""
    return await list_categories(current_user["uid"], db)


@router.get("/categories/{category_id}", response_model=CategoryResponse)
async def get_category_api(
    category_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Get a built-in category or one of the user's own."""
    return await get_category(str(category_id), current_user["uid"], db)


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category_api(
    request: CreateCategoryRequest,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Create a custom category for the current user.

    Args:
        request: Category name, look and initial questions
        db: Database session dependency
        current_user: Authenticated user

    Returns:
        The created category
    """
    return await create_custom_category(request, current_user["uid"], db)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions_api(
    status_filter: Optional[SessionStatus] = Query(None, alias="status"),
    category_id: Optional[UUID] = Query(None, alias="categoryId"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    List the current user's sessions, most recently active first.

    Args:
        status_filter: Only sessions with this status
        category_id: Only sessions in this category
        limit: Page size (1-100)
        offset: Number of sessions to skip
        db: Database session dependency
        current_user: Authenticated user

    Returns:
        SessionListResponse with offset pagination metadata
    """
    return await list_sessions(
        current_user["uid"],
        db,
        status=status_filter,
        category_id=str(category_id) if category_id else None,
        limit=limit,
        offset=offset,
    )


@router.post("/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session_api(
    request: CreateSessionRequest,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Start a new counseling session."""
    return await create_session(request, current_user["uid"], db)


@router.get("/sessions/stats", response_model=SessionStatsResponse)
async def get_session_stats_api(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Aggregate statistics over the current user's sessions."""
    return await get_session_stats(current_user["uid"], db)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session_api(
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    return await get_session(str(session_id), current_user["uid"], db)


@router.patch("/sessions/{session_id}", response_model=SessionResponse)
async def update_session_api(
    session_id: UUID,
    request: UpdateSessionRequest,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Partially update a session. Metadata is merged into the stored metadata.

    Args:
        session_id: ID of the session
        request: Fields to change
        db: Database session dependency
        current_user: Authenticated user

    Returns:
        The updated session
    """
    return await update_session(str(session_id), request, current_user["uid"], db)


@router.delete("/sessions/{session_id}", response_model=DeleteSessionResponse)
async def delete_session_api(
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Archive a session. Safe to repeat."""
    return await archive_session(str(session_id), current_user["uid"], db)


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

@router.get("/sessions/{session_id}/messages", response_model=MessageListResponse)
async def list_messages_api(
    session_id: UUID,
    limit: int = Query(50, ge=1, le=100),
    cursor: Optional[UUID] = Query(None),
    before_date: Optional[datetime] = Query(None, alias="beforeDate"),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Retrieve messages in a session, newest first.

    Args:
        session_id: ID of the session
        limit: Maximum number of messages to return (1-100)
        cursor: Message id from the previous page; returns older messages
        before_date: Only messages created before this time
        db: Database session dependency
        current_user: Authenticated user

    Returns:
        MessageListResponse with cursor pagination metadata
    """
    return await list_messages(
        str(session_id),
        current_user["uid"],
        db,
        limit=limit,
        cursor=str(cursor) if cursor else None,
        before_date=before_date,
    )


@router.post("/sessions/{session_id}/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_message_api(
    session_id: UUID,
    request: CreateMessageRequest,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Post a message to one of the current user's sessions."""
    return await create_message(str(session_id), request, current_user["uid"], db)


@router.patch("/messages/{message_id}/bookmark", response_model=MessageResponse)
async def toggle_bookmark_api(
    message_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """Flip the bookmark flag on a message."""
    return await toggle_bookmark(str(message_id), current_user["uid"], db)
