from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from .user_model import PyObjectId

# Stored next to `priority` so lists sort urgent-first instead of alphabetically
PRIORITY_RANK = {"low": 0, "medium": 1, "high": 2, "urgent": 3}


class AttachmentModel(BaseModel):
    name: str
    url: str
    type: str


class AnnouncementModel(BaseModel):
    id: Optional[PyObjectId] = Field(alias="_id", default=None)
    author_id: PyObjectId
    title: str
    content: str
    category: str = "general"           # academic | administrative | event | general | urgent
    priority: str = "medium"
    priority_rank: int = PRIORITY_RANK["medium"]
    target_audience: str = "all"        # all | students | faculty | staff | specific
    target_groups: List[str] = Field(default_factory=list)
    attachments: List[AttachmentModel] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    is_active: bool = True
    expires_at: Optional[datetime] = None

    # Counted collection: views_count == len(views)
    views: List[PyObjectId] = Field(default_factory=list)
    views_count: int = 0

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {"populate_by_name": True}
