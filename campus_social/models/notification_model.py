from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from .user_model import PyObjectId


class NotificationModel(BaseModel):
    id: Optional[PyObjectId] = Field(alias="_id", default=None)
    recipient_id: PyObjectId
    sender_id: Optional[PyObjectId] = None
    type: str  # like | comment | follow | event_rsvp | group_join
    title: str
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)
    is_read: bool = False
    read_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {"populate_by_name": True}
