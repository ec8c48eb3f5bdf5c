from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from .user_model import PyObjectId


# Directed edge: follower -> following (unique per ordered pair)
class FollowModel(BaseModel):
    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    follower_id: PyObjectId
    following_id: PyObjectId
    created_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {"populate_by_name": True}
