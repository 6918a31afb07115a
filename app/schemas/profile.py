from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import UrlStr

class ProfileResponse(BaseModel):
    id: str
    nickname: str
    avatar_url: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ProfileUpdate(BaseModel):
    nickname: str = Field(max_length=50)
    avatar_url: Optional[UrlStr] = None

    @field_validator("nickname", mode="before")
    @classmethod
    def strip_nickname(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v
