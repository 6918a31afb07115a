import logging
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ApiError, ErrorCode, validation_details
from app.models import CounselingMessage, CounselingSession
from app.schemas.counseling import (
    CreateMessageRequest,
    CursorPagination,
    MessageListResponse,
    MessageResponse,
    MessageType,
)
from app.services.session_service import get_owned_session
from app.utils.time_utils import as_utc, utc_now

# Configure logger for this module
logger = logging.getLogger(__name__)

def map_message_row(row: CounselingMessage) -> MessageResponse:
    """
    Validate a stored message row and map it to its API shape.

    Raises:
        ValidationError: If the stored row does not match the schema
    """
    return MessageResponse.model_validate({
        "id": row.id,
        "session_id": row.session_id,
        "sender_id": row.sender_id,
        "content": row.content,
        "message_type": row.message_type,
        "is_bookmarked": row.is_bookmarked,
        "metadata": row.message_meta,
        "created_at": row.created_at,
    })

def _to_response(row: CounselingMessage, message: str) -> MessageResponse:
    try:
        return map_message_row(row)
    except ValidationError as e:
        logger.error(f"Message {row.id} failed validation")
        raise ApiError(500, ErrorCode.MESSAGE_VALIDATION_ERROR, message, validation_details(e))

async def create_message(
    session_id: str,
    request: CreateMessageRequest,
    user_id: str,
    db: AsyncSession
) -> MessageResponse:
    """
    Append a message from the user to one of their sessions.

    The session row is locked, then its message count is incremented and
    its last activity time moved to now, in the same transaction as the
    insert.

    Args:
        session_id: ID of the session to post into
        request: Validated message payload
        user_id: ID of the sender
        db: Async database session

    Returns:
        The created message

    Raises:
        ApiError: 404 if the session is not the user's, 500 if the insert fails
    """
    logger.info(f"Creating message in session {session_id} for user {user_id}")
    session = await get_owned_session(session_id, user_id, db, ErrorCode.MESSAGE_CREATE_ERROR, for_update=True)

    now = utc_now()
    message = CounselingMessage(
        session_id=session.id,
        sender_id=user_id,
        content=request.content,
        message_type=MessageType(request.message_type.value),
        is_bookmarked=False,
        message_meta=request.metadata,
        created_at=now,
    )
    metadata = dict(session.session_meta or {})
    count = metadata.get("messageCount")
    metadata["messageCount"] = (count if isinstance(count, int) and count > 0 else 0) + 1
    session.session_meta = metadata
    session.last_activity_at = now

    try:
        db.add(message)
        await db.commit()
        await db.refresh(message)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"Failed to create message in session {session_id}")
        raise ApiError(500, ErrorCode.MESSAGE_CREATE_ERROR, str(e))

    logger.debug(f"Created message {message.id}, session now has {metadata['messageCount']} messages")
    return _to_response(message, "Created message validation failed")

async def list_messages(
    session_id: str,
    user_id: str,
    db: AsyncSession,
    limit: int = 50,
    cursor: Optional[str] = None,
    before_date: Optional[datetime] = None
) -> MessageListResponse:
    """
    Retrieve a page of messages in a session, newest first.

    Args:
        session_id: ID of the session
        user_id: ID of the requesting user (must own the session)
        db: Async database session
        limit: Maximum number of messages to return
        cursor: ID of the last message of the previous page; only older
            messages are returned. Unknown ids are ignored.
        before_date: Only messages created strictly before this time

    Returns:
        MessageListResponse containing:
            - data: the page of messages
            - pagination.total: messages matching the filters
            - pagination.cursor: id to pass for the next page, None when empty
            - pagination.has_more: whether another page exists
    """
    logger.info(f"Retrieving messages for session: {session_id}, user: {user_id}, limit: {limit}, cursor: {cursor}")
    await get_owned_session(session_id, user_id, db, ErrorCode.MESSAGE_FETCH_ERROR)

    conditions = [CounselingMessage.session_id == session_id]
    try:
        if cursor:
            cursor_result = await db.execute(
                select(CounselingMessage.created_at, CounselingMessage.id).where(
                    CounselingMessage.id == cursor,
                    CounselingMessage.session_id == session_id
                )
            )
            cursor_row = cursor_result.first()
            if cursor_row is not None:
                # Same ordering as the page query: created_at desc, id desc
                conditions.append(
                    or_(
                        CounselingMessage.created_at < cursor_row.created_at,
                        and_(
                            CounselingMessage.created_at == cursor_row.created_at,
                            CounselingMessage.id < cursor_row.id
                        )
                    )
                )
            else:
                logger.warning(f"Ignoring unknown cursor {cursor} for session {session_id}")

        if before_date is not None:
            conditions.append(CounselingMessage.created_at < as_utc(before_date))

        total_result = await db.execute(
            select(func.count(CounselingMessage.id)).where(*conditions)
        )
        total = total_result.scalar() or 0

        # Fetch one extra row to determine if more exist
        result = await db.execute(
            select(CounselingMessage)
            .where(*conditions)
            .order_by(CounselingMessage.created_at.desc(), CounselingMessage.id.desc())
            .limit(limit + 1)
        )
        rows = result.scalars().all()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to fetch messages for session {session_id}")
        raise ApiError(500, ErrorCode.MESSAGE_FETCH_ERROR, str(e))

    has_more = len(rows) > limit
    rows = rows[:limit]

    messages: List[MessageResponse] = []
    for row in rows:
        try:
            messages.append(map_message_row(row))
        except ValidationError as e:
            logger.warning(f"Skipping invalid message row {row.id}: {e.error_count()} errors")

    logger.info(f"Retrieved {len(messages)} messages from session {session_id}")
    return MessageListResponse(
        data=messages,
        pagination=CursorPagination(
            total=total,
            limit=limit,
            cursor=rows[-1].id if rows else None,
            has_more=has_more,
        ),
    )

async def toggle_bookmark(message_id: str, user_id: str, db: AsyncSession) -> MessageResponse:
    """
    Flip the bookmark flag on a message in one of the user's sessions.

    Raises:
        ApiError: 404 if the message does not exist, 403 if its session
            belongs to another user
    """
    logger.info(f"Toggling bookmark on message {message_id} for user {user_id}")
    try:
        result = await db.execute(
            select(CounselingMessage, CounselingSession.user_id)
            .join(CounselingSession, CounselingMessage.session_id == CounselingSession.id)
            .where(CounselingMessage.id == message_id)
        )
        row = result.first()
    except SQLAlchemyError as e:
        logger.exception(f"Failed to fetch message {message_id}")
        raise ApiError(500, ErrorCode.MESSAGE_FETCH_ERROR, str(e))

    if row is None:
        logger.warning(f"Message not found: {message_id}")
        raise ApiError(404, ErrorCode.MESSAGE_NOT_FOUND)

    message, owner_id = row
    if owner_id != user_id:
        logger.warning(f"User {user_id} tried to bookmark message {message_id} owned by {owner_id}")
        raise ApiError(403, ErrorCode.MESSAGE_UNAUTHORIZED)

    message.is_bookmarked = not message.is_bookmarked
    try:
        await db.commit()
        await db.refresh(message)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception(f"Failed to update bookmark on message {message_id}")
        raise ApiError(500, ErrorCode.MESSAGE_UPDATE_ERROR, str(e))

    return _to_response(message, "Updated message validation failed")
