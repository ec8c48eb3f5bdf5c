from datetime import datetime
from typing import List, Literal, Optional
from pydantic import AnyHttpUrl, Field, field_validator

from ._base import AuthorPreview, CamelModel, PyObjectId
from ..utils.datetime_utils import to_naive_utc

AnnouncementCategory = Literal["academic", "administrative", "event", "general", "urgent"]
AnnouncementPriority = Literal["low", "medium", "high", "urgent"]
TargetAudience = Literal["all", "students", "faculty", "staff", "specific"]


class AttachmentIn(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    url: AnyHttpUrl
    type: str = Field(min_length=1, max_length=50)


class AttachmentOut(CamelModel):
    name: str
    url: str
    type: str


def _check_tags(v):
    for t in v or []:
        if len(t) > 50:
            raise ValueError("tags must be at most 50 characters")
    return v


class AnnouncementCreateRequest(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=2000)
    category: AnnouncementCategory = "general"
    priority: AnnouncementPriority = "medium"
    target_audience: TargetAudience = "all"
    target_groups: List[str] = Field(default_factory=list, max_length=50)
    attachments: List[AttachmentIn] = Field(default_factory=list, max_length=10)
    expires_at: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list, max_length=20)

    @field_validator("expires_at", mode="after")
    @classmethod
    def _naive_utc(cls, v):
        return to_naive_utc(v)

    @field_validator("tags")
    @classmethod
    def _tag_length(cls, v):
        return _check_tags(v)


class AnnouncementUpdateRequest(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    category: Optional[AnnouncementCategory] = None
    priority: Optional[AnnouncementPriority] = None
    target_audience: Optional[TargetAudience] = None
    target_groups: Optional[List[str]] = Field(default=None, max_length=50)
    attachments: Optional[List[AttachmentIn]] = Field(default=None, max_length=10)
    expires_at: Optional[datetime] = None
    tags: Optional[List[str]] = Field(default=None, max_length=20)

    @field_validator("expires_at", mode="after")
    @classmethod
    def _naive_utc(cls, v):
        return to_naive_utc(v)

    @field_validator("tags")
    @classmethod
    def _tag_length(cls, v):
        return _check_tags(v)


class AnnouncementOut(CamelModel):
    id: PyObjectId
    author: Optional[AuthorPreview] = None
    title: str
    content: str
    category: str
    priority: str
    target_audience: str
    target_groups: List[str] = []
    attachments: List[AttachmentOut] = []
    tags: List[str] = []
    is_active: bool = True
    expires_at: Optional[datetime] = None
    views_count: int = 0
    is_viewed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AnnouncementResponse(CamelModel):
    announcement: AnnouncementOut


class AnnouncementsResponse(CamelModel):
    announcements: List[AnnouncementOut]
    next_cursor: Optional[str] = None


class AnnouncementViewResponse(CamelModel):
    message: str
    views_count: int
