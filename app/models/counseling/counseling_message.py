import uuid
from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.database import Base, JSONType
from app.schemas.counseling import MessageType
from app.utils.time_utils import utc_now

class CounselingMessage(Base):
    __tablename__ = "counseling_messages"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    session_id = Column(String, ForeignKey("counseling_sessions.id"), nullable=False, index=True)
    sender_id = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    message_type = Column(Enum(MessageType, name="message_type"), nullable=False, default=MessageType.text)
    is_bookmarked = Column(Boolean, nullable=False, default=False)
    message_meta = Column("metadata", JSONType, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)

    session = relationship("CounselingSession", back_populates="messages")
