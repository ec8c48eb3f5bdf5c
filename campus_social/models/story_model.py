from datetime import datetime, timedelta
from typing import List, Optional
from pydantic import BaseModel, Field

from .user_model import PyObjectId
from ..config import STORY_TTL_HOURS


def _default_expiry() -> datetime:
    return datetime.utcnow() + timedelta(hours=STORY_TTL_HOURS)


class StoryModel(BaseModel):
    id: Optional[PyObjectId] = Field(alias="_id", default=None)
    author_id: PyObjectId
    content: str
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    type: str = "text"  # text | image | video
    views: List[PyObjectId] = Field(default_factory=list)
    views_count: int = 0
    expires_at: datetime = Field(default_factory=_default_expiry)
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {"populate_by_name": True}
