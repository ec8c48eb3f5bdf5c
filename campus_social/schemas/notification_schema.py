from datetime import datetime
from typing import Any, Dict, List, Optional

from ._base import AuthorPreview, CamelModel, PyObjectId


class NotificationOut(CamelModel):
    id: PyObjectId
    type: str
    title: str
    message: str
    sender: Optional[AuthorPreview] = None
    data: Dict[str, Any] = {}
    is_read: bool = False
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class NotificationsResponse(CamelModel):
    notifications: List[NotificationOut]
    unread_count: int
    next_cursor: Optional[str] = None


class MarkReadResponse(CamelModel):
    message: str
    updated: int
