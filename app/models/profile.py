from sqlalchemy import Column, DateTime, String

from app.database import Base
from app.utils.time_utils import utc_now

class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the auth-service user
    id = Column(String, primary_key=True, index=True)
    nickname = Column(String(50), nullable=False, default="")
    avatar_url = Column(String, nullable=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
