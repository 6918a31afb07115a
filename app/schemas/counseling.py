from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.common import CamelModel, UrlStr


class SessionStatus(str, Enum):
    active = "active"
    paused = "paused"
    completed = "completed"
    archived = "archived"

class MessageType(str, Enum):
    """
    Attributes:
        text: Plain text written by a participant
        image: Image content, URL carried in metadata
        file: Generic file attachment
        system: Generated by the service, never accepted from clients
    """
    text = "text"
    image = "image"
    file = "file"
    system = "system"

class ClientMessageType(str, Enum):
    text = "text"
    image = "image"
    file = "file"

class QuestionType(str, Enum):
    text = "text"
    select = "select"
    multiselect = "multiselect"
    scale = "scale"


# ---------------------------------------------------------------------------
# Value types stored inside JSON columns
# ---------------------------------------------------------------------------

class Question(CamelModel):
    id: str = Field(min_length=1)
    text: str = Field(min_length=1)
    type: QuestionType
    options: Optional[List[str]] = None
    required: bool
    order: int = Field(ge=0)

class InitialResponse(CamelModel):
    question_id: str = Field(min_length=1)
    answer: Union[str, List[str]]
    timestamp: datetime

class SessionMetadata(CamelModel):
    """Free-form session metadata; the known keys are typed, the rest pass through."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    message_count: Optional[int] = Field(None, ge=0)
    tags: Optional[List[str]] = None
    last_read_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class CreateCategoryRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    icon: str = Field("MessageCircle", max_length=50)
    color: str = Field("#3B82F6", pattern=r"^#[0-9A-Fa-f]{6}$")
    initial_questions: List[Question] = Field(default_factory=list, max_length=10)

class CreateSessionRequest(CamelModel):
    category_id: UUID
    title: str = Field(min_length=1, max_length=200)
    initial_responses: Dict[str, InitialResponse] = Field(default_factory=dict)

class UpdateSessionRequest(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    status: Optional[SessionStatus] = None
    summary: Optional[str] = Field(None, max_length=1000)
    thumbnail: Optional[UrlStr] = None
    metadata: Optional[SessionMetadata] = None

class CreateMessageRequest(CamelModel):
    content: str = Field(min_length=1, max_length=5000)
    message_type: ClientMessageType = ClientMessageType.text
    metadata: Optional[Dict[str, Any]] = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class CategoryResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    icon: str
    color: str
    initial_questions: List[Question]
    is_custom: bool
    user_id: Optional[str] = None
    created_at: datetime

class CategoryListResponse(CamelModel):
    default_categories: List[CategoryResponse]
    custom_categories: List[CategoryResponse]

class SessionResponse(CamelModel):
    id: str
    user_id: str
    category_id: str
    counselor_id: Optional[str] = None
    title: str
    status: SessionStatus
    initial_responses: Dict[str, InitialResponse]
    metadata: Dict[str, Any]
    summary: Optional[str] = None
    thumbnail: Optional[str] = None
    created_at: datetime
    last_activity_at: datetime
    updated_at: datetime

class MessageResponse(CamelModel):
    id: str
    session_id: str
    sender_id: str
    content: str
    message_type: MessageType
    is_bookmarked: bool
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime

class OffsetPagination(CamelModel):
    total: int = Field(ge=0)
    limit: int = Field(ge=1)
    offset: int = Field(ge=0)
    has_more: bool

class CursorPagination(CamelModel):
    total: int = Field(ge=0)
    limit: int = Field(ge=1)
    cursor: Optional[str] = None
    has_more: bool

class SessionListResponse(CamelModel):
    data: List[SessionResponse]
    pagination: OffsetPagination

class MessageListResponse(CamelModel):
    data: List[MessageResponse]
    pagination: CursorPagination

class DeleteSessionResponse(CamelModel):
    success: bool

class MostActiveCategory(CamelModel):
    id: str
    name: str
    session_count: int = Field(ge=0)

class RecentActivity(CamelModel):
    session_id: str
    session_title: str
    last_activity_at: datetime

class SessionStatsResponse(CamelModel):
    total_sessions: int = Field(ge=0)
    active_sessions: int = Field(ge=0)
    completed_sessions: int = Field(ge=0)
    total_messages: int = Field(ge=0)
    avg_messages_per_session: float = Field(ge=0)
    most_active_category: Optional[MostActiveCategory] = None
    recent_activity: List[RecentActivity]
