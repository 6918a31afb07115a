import uuid
from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.database import Base, JSONType
from app.schemas.counseling import SessionStatus
from app.utils.time_utils import utc_now

class CounselingSession(Base):
    __tablename__ = "counseling_sessions"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    category_id = Column(String, ForeignKey("counseling_categories.id"), nullable=False, index=True)
    counselor_id = Column(String, nullable=True)
    title = Column(String, nullable=False)
    status = Column(Enum(SessionStatus, name="session_status"), nullable=False, default=SessionStatus.active)
    initial_responses = Column(JSONType, nullable=False, default=dict)
    # "metadata" is reserved on declarative classes
    session_meta = Column("metadata", JSONType, nullable=False, default=dict)
    summary = Column(Text, nullable=True)
    thumbnail = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    last_activity_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    category = relationship("CounselingCategory", back_populates="sessions")
    messages = relationship("CounselingMessage", back_populates="session", cascade="all, delete-orphan")
