import uuid
from sqlalchemy import Boolean, Column, DateTime, String, Text
from sqlalchemy.orm import relationship

from app.database import Base, JSONType
from app.utils.time_utils import utc_now

class CounselingCategory(Base):
    __tablename__ = "counseling_categories"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String, nullable=False, default="MessageCircle")
    color = Column(String, nullable=False, default="#3B82F6")
    initial_questions = Column(JSONType, nullable=False, default=list)
    is_custom = Column(Boolean, nullable=False, default=False, index=True)
    # Null for the built-in categories
    user_id = Column(String, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    sessions = relationship("CounselingSession", back_populates="category")
