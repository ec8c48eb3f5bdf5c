from datetime import datetime
from typing import List, Literal, Optional
from pydantic import AnyHttpUrl, Field, PositiveInt, field_validator, model_validator

from ._base import AuthorPreview, CamelModel, PyObjectId
from ..utils.datetime_utils import to_naive_utc

EventCategory = Literal["academic", "sports", "cultural", "social", "workshop", "seminar", "other"]


class EventCreateRequest(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=2000)
    category: EventCategory = "social"
    location: str = Field(min_length=1, max_length=200)
    start_date: datetime
    end_date: datetime
    image_url: Optional[AnyHttpUrl] = None
    max_attendees: Optional[PositiveInt] = None
    tags: List[str] = Field(default_factory=list, max_length=20)
    requirements: Optional[str] = Field(default=None, max_length=500)
    contact_info: Optional[str] = Field(default=None, max_length=200)

    @field_validator("start_date", "end_date", mode="after")
    @classmethod
    def _naive_utc(cls, v):
        return to_naive_utc(v)

    @field_validator("tags")
    @classmethod
    def _tag_length(cls, v):
        for t in v:
            if len(t) > 50:
                raise ValueError("tags must be at most 50 characters")
        return v

    @model_validator(mode="after")
    def _ends_after_start(self):
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class EventUpdateRequest(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    category: Optional[EventCategory] = None
    location: Optional[str] = Field(default=None, min_length=1, max_length=200)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    image_url: Optional[AnyHttpUrl] = None
    max_attendees: Optional[PositiveInt] = None
    tags: Optional[List[str]] = Field(default=None, max_length=20)
    requirements: Optional[str] = Field(default=None, max_length=500)
    contact_info: Optional[str] = Field(default=None, max_length=200)

    @field_validator("start_date", "end_date", mode="after")
    @classmethod
    def _naive_utc(cls, v):
        return to_naive_utc(v)


class EventOut(CamelModel):
    id: PyObjectId
    organizer: Optional[AuthorPreview] = None
    title: str
    description: str
    category: str
    location: str
    start_date: datetime
    end_date: datetime
    image_url: Optional[str] = None
    max_attendees: Optional[int] = None
    attendees_count: int = 0
    is_attending: bool = False
    is_public: bool = True
    is_cancelled: bool = False
    tags: List[str] = []
    requirements: Optional[str] = None
    contact_info: Optional[str] = None
    created_at: Optional[datetime] = None


class EventResponse(CamelModel):
    event: EventOut


class EventsResponse(CamelModel):
    events: List[EventOut]


class RsvpResponse(CamelModel):
    message: str
    attendees_count: int
    is_attending: bool
