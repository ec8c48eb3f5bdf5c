from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from .user_model import PyObjectId


class EventModel(BaseModel):
    id: Optional[PyObjectId] = Field(alias="_id", default=None)
    organizer_id: PyObjectId
    title: str
    description: str
    category: str = "social"
    location: str
    start_date: datetime
    end_date: datetime
    image_url: Optional[str] = None
    max_attendees: Optional[int] = None
    attendees: List[PyObjectId] = Field(default_factory=list)
    attendees_count: int = 0
    is_public: bool = True
    is_cancelled: bool = False
    tags: List[str] = Field(default_factory=list)
    requirements: Optional[str] = None
    contact_info: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {"populate_by_name": True}
