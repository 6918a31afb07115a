import logging
from collections import Counter
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ApiError, ErrorCode, validation_details
from app.models import CounselingCategory, CounselingSession
from app.schemas.counseling import (
    CreateSessionRequest,
    DeleteSessionResponse,
    MostActiveCategory,
    OffsetPagination,
    RecentActivity,
    SessionListResponse,
    SessionMetadata,
    SessionResponse,
    SessionStatsResponse,
    SessionStatus,
    UpdateSessionRequest,
)
from app.services.category_service import get_visible_category
from app.utils.time_utils import utc_now

# Configure logger for this module
logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 5

def owned_session_query(session_id: str, user_id: str, for_update: bool = False):
    query = select(CounselingSession).where(
        CounselingSession.id == session_id,
        CounselingSession.user_id == user_id
    )
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    return query

def map_session_row(row: CounselingSession) -> SessionResponse:
    """
    Validate a stored session row and map it to its API shape.

    Raises:
        ValidationError: If the stored row does not match the schema
    """
    metadata = SessionMetadata.model_validate(row.session_meta or {})
    return SessionResponse.model_validate({
        "id": row.id,
        "user_id": row.user_id,
        "category_id": row.category_id,
        "counselor_id": row.counselor_id,
        "title": row.title,
        "status": row.status,
        "initial_responses": row.initial_responses or {},
        "metadata": metadata.model_dump(mode="json", by_alias=True, exclude_none=True),
        "summary": row.summary,
        "thumbnail": row.thumbnail,
        "created_at": row.created_at,
        "last_activity_at": row.last_activity_at,
        "updated_at": row.updated_at,
    })

def _to_response(row: CounselingSession, message: str = "Session data validation failed") -> SessionResponse:
    try:
        return map_session_row(row)
    except ValidationError as e:
        logger.error(f"Session {row.id} failed validation")
        raise ApiError(500, ErrorCode.SESSION_VALIDATION_ERROR, message, validation_details(e))

def _message_count(row: CounselingSession) -> int:
    count = (row.session_meta or {}).get("messageCount")
    return count if isinstance(count, int) and count > 0 else 0

async def get_owned_session(
    session_id: str,
    user_id: str,
    db: AsyncSession,
    error_code: ErrorCode = ErrorCode.SESSION_FETCH_ERROR,
    for_update: bool = False
) -> CounselingSession:
    """
    Fetch a session row owned by the user.

    Args:
        for_update: Lock the row until the transaction ends, for
            read-modify-write of its metadata

    Raises:
        ApiError: 404 if the session does not exist or belongs to someone else
    """
    try:
        result = await db.execute(owned_session_query(session_id, user_id, for_update))
    except SQLAlchemyError as e:
        logger.exception(f"Failed to fetch session {session_id}")
        raise ApiError(500, error_code, str(e))

    session = result.scalar_one_or_none()
    if session is None:
        logger.warning(f"Session not found: {session_id} for user: {user_id}")
        raise ApiError(404, ErrorCode.SESSION_NOT_FOUND)
    return session

async def create_session(request: CreateSessionRequest, user_id: str, db: AsyncSession) -> SessionResponse:
    """
    Start a new session in a category visible to the user.

    Args:
        request: Validated session payload
        user_id: ID of the owning user
        db: Async database session

    Returns:
        The created session, status active with a zero message count

    Raises:
        ApiError: 404 if the category is unknown, 500 if the insert fails
    """
    category_id = str(request.category_id)
    logger.info(f"Creating session for user {user_id} in category {category_id}")
    await get_visible_category(category_id, user_id, db)

    now = utc_now()
    session = CounselingSession(
        user_id=user_id,
        category_id=category_id,
        title=request.title,
        status=SessionStatus.active,
        initial_responses={
            key: value.model_dump(mode="json", by_alias=True)
            for key, value in request.initial_responses.items()
        },
        session_meta={"messageCount": 0},
        created_at=now,
        last_activity_at=now,
        updated_at=now,
    )
    try:
        db.add(session)
        await db.commit()
        await db.refresh(session)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"Failed to create session for user {user_id}")
        raise ApiError(500, ErrorCode.SESSION_CREATE_ERROR, str(e))

    logger.info(f"Created session {session.id}")
    return _to_response(session, "Created session validation failed")

async def list_sessions(
    user_id: str,
    db: AsyncSession,
    status: Optional[SessionStatus] = None,
    category_id: Optional[str] = None,
    limit: int = 20,
    offset: int = 0
) -> SessionListResponse:
    """
    List the user's sessions, most recently active first.

    Args:
        user_id: ID of the requesting user
        db: Async database session
        status: Only sessions in this status
        category_id: Only sessions in this category
        limit: Page size
        offset: Number of sessions to skip

    Returns:
        SessionListResponse with the page and offset pagination metadata
    """
    logger.info(f"Listing sessions for user {user_id}, status: {status}, category: {category_id}, limit: {limit}, offset: {offset}")
    conditions = [CounselingSession.user_id == user_id]
    if status is not None:
        conditions.append(CounselingSession.status == status)
    if category_id is not None:
        conditions.append(CounselingSession.category_id == category_id)

    try:
        total_result = await db.execute(
            select(func.count(CounselingSession.id)).where(*conditions)
        )
        total = total_result.scalar() or 0

        result = await db.execute(
            select(CounselingSession)
            .where(*conditions)
            .order_by(CounselingSession.last_activity_at.desc(), CounselingSession.id.desc())
            .offset(offset)
            .limit(limit)
        )
        rows = result.scalars().all()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to list sessions for user {user_id}")
        raise ApiError(500, ErrorCode.SESSION_FETCH_ERROR, str(e))

    sessions: List[SessionResponse] = []
    for row in rows:
        try:
            sessions.append(map_session_row(row))
        except ValidationError as e:
            logger.warning(f"Skipping invalid session row {row.id}: {e.error_count()} errors")

    logger.debug(f"Returning {len(sessions)} of {total} sessions")
    return SessionListResponse(
        data=sessions,
        pagination=OffsetPagination(
            total=total,
            limit=limit,
            offset=offset,
            has_more=total > offset + len(sessions),
        ),
    )

async def get_session(session_id: str, user_id: str, db: AsyncSession) -> SessionResponse:
    session = await get_owned_session(session_id, user_id, db)
    return _to_response(session)

async def update_session(
    session_id: str,
    request: UpdateSessionRequest,
    user_id: str,
    db: AsyncSession
) -> SessionResponse:
    """
    Apply a partial update. Only fields present in the payload change;
    metadata is shallow-merged into what is stored.

    Raises:
        ApiError: 404 if the session is not the user's, 500 if the update fails
    """
    logger.info(f"Updating session {session_id} for user {user_id}, fields: {sorted(request.model_fields_set)}")
    session = await get_owned_session(session_id, user_id, db, ErrorCode.SESSION_UPDATE_ERROR, for_update=True)
    provided = request.model_fields_set

    if request.title is not None:
        session.title = request.title
    if request.status is not None:
        session.status = request.status
    if "summary" in provided:
        session.summary = request.summary
    if "thumbnail" in provided:
        session.thumbnail = request.thumbnail
    if request.metadata is not None:
        # Reassign so the JSON column is flagged dirty
        session.session_meta = {
            **(session.session_meta or {}),
            **request.metadata.model_dump(mode="json", by_alias=True, exclude_unset=True),
        }
    session.updated_at = utc_now()

    try:
        await db.commit()
        await db.refresh(session)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"Failed to update session {session_id}")
        raise ApiError(500, ErrorCode.SESSION_UPDATE_ERROR, str(e))

    return _to_response(session, "Updated session validation failed")

async def archive_session(session_id: str, user_id: str, db: AsyncSession) -> DeleteSessionResponse:
    """Soft-delete a session by archiving it. Archiving twice is a no-op."""
    logger.info(f"Archiving session {session_id} for user {user_id}")
    session = await get_owned_session(session_id, user_id, db, ErrorCode.SESSION_DELETE_ERROR)
    if session.status == SessionStatus.archived:
        return DeleteSessionResponse(success=True)

    session.status = SessionStatus.archived
    session.updated_at = utc_now()
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"Failed to archive session {session_id}")
        raise ApiError(500, ErrorCode.SESSION_DELETE_ERROR, str(e))

    return DeleteSessionResponse(success=True)

async def get_session_stats(user_id: str, db: AsyncSession) -> SessionStatsResponse:
    """
    Aggregate statistics over every session the user owns, archived included.

    Args:
        user_id: ID of the requesting user
        db: Async database session

    Returns:
        SessionStatsResponse containing:
            - session counts overall, active and completed
            - total and average message counts (from session metadata)
            - the category with the most sessions, ties going to the
              category whose first session is oldest
            - the five most recently active sessions
    """
    logger.info(f"Computing session stats for user {user_id}")
    try:
        result = await db.execute(
            select(CounselingSession)
            .where(CounselingSession.user_id == user_id)
            .order_by(CounselingSession.created_at.asc(), CounselingSession.id.asc())
        )
        sessions = result.scalars().all()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to fetch sessions for stats, user {user_id}")
        raise ApiError(500, ErrorCode.SESSION_FETCH_ERROR, str(e))

    total_sessions = len(sessions)
    active_sessions = sum(1 for s in sessions if s.status == SessionStatus.active)
    completed_sessions = sum(1 for s in sessions if s.status == SessionStatus.completed)
    total_messages = sum(_message_count(s) for s in sessions)
    avg_messages = total_messages / total_sessions if total_sessions else 0

    most_active_category = None
    category_counts = Counter(s.category_id for s in sessions)
    if category_counts:
        # max() keeps the first maximum, i.e. the category seen earliest
        top_category_id, top_count = max(category_counts.items(), key=lambda item: item[1])
        try:
            category_result = await db.execute(
                select(CounselingCategory.name).where(CounselingCategory.id == top_category_id)
            )
        except SQLAlchemyError as e:
            logger.exception(f"Failed to fetch category {top_category_id} for stats")
            raise ApiError(500, ErrorCode.SESSION_FETCH_ERROR, str(e))
        category_name = category_result.scalar_one_or_none()
        if category_name is not None:
            most_active_category = MostActiveCategory(
                id=top_category_id,
                name=category_name,
                session_count=top_count,
            )

    recent = sorted(sessions, key=lambda s: s.last_activity_at, reverse=True)[:RECENT_ACTIVITY_LIMIT]

    return SessionStatsResponse(
        total_sessions=total_sessions,
        active_sessions=active_sessions,
        completed_sessions=completed_sessions,
        total_messages=total_messages,
        avg_messages_per_session=avg_messages,
        most_active_category=most_active_category,
        recent_activity=[
            RecentActivity(
                session_id=s.id,
                session_title=s.title,
                last_activity_at=s.last_activity_at,
            )
            for s in recent
        ],
    )
