from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from .user_model import PyObjectId


class GroupModel(BaseModel):
    id: Optional[PyObjectId] = Field(alias="_id", default=None)
    creator_id: PyObjectId
    name: str
    description: str
    category: str = "other"
    privacy: str = "public"  # public | private | restricted
    admins: List[PyObjectId] = Field(default_factory=list)
    members: List[PyObjectId] = Field(default_factory=list)
    members_count: int = 0
    avatar_url: Optional[str] = None
    rules: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {"populate_by_name": True}
