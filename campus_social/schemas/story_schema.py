from datetime import datetime
from typing import List, Literal, Optional
from pydantic import AnyHttpUrl, Field

from ._base import AuthorPreview, CamelModel, PyObjectId


class StoryCreateRequest(CamelModel):
    content: str = Field(min_length=1, max_length=500)
    image_url: Optional[AnyHttpUrl] = None
    video_url: Optional[AnyHttpUrl] = None
    type: Literal["text", "image", "video"] = "text"


class StoryOut(CamelModel):
    id: PyObjectId
    author: Optional[AuthorPreview] = None
    content: str
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    type: str = "text"
    views_count: int = 0
    is_viewed: bool = False
    expires_at: datetime
    created_at: Optional[datetime] = None


class StoryResponse(CamelModel):
    story: StoryOut


class StoriesResponse(CamelModel):
    stories: List[StoryOut]


class AuthorStories(CamelModel):
    author: Optional[AuthorPreview] = None
    stories: List[StoryOut]


class StoriesFeedResponse(CamelModel):
    stories_by_author: List[AuthorStories]


class StoryViewResponse(CamelModel):
    message: str
    views_count: int


class StoryViewersResponse(CamelModel):
    viewers: List[AuthorPreview]
    views_count: int
