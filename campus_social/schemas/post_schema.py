from datetime import datetime
from typing import List, Literal, Optional
from pydantic import AnyHttpUrl, Field

from ._base import AuthorPreview, CamelModel, PyObjectId


class MediaItem(CamelModel):
    type: Literal["image", "video"]
    url: AnyHttpUrl
    thumbnail: Optional[AnyHttpUrl] = None


class PostCreateRequest(CamelModel):
    caption: Optional[str] = Field(default=None, max_length=500)
    content: Optional[str] = Field(default=None, max_length=5000)
    image_url: Optional[AnyHttpUrl] = None
    media: List[MediaItem] = Field(default_factory=list, max_length=10)
    tags: List[str] = Field(default_factory=list, max_length=30)
    location: Optional[str] = Field(default=None, max_length=200)
    is_public: bool = True


class PostUpdateRequest(CamelModel):
    caption: Optional[str] = Field(default=None, max_length=500)
    content: Optional[str] = Field(default=None, max_length=5000)
    tags: Optional[List[str]] = Field(default=None, max_length=30)
    location: Optional[str] = Field(default=None, max_length=200)
    is_public: Optional[bool] = None


class MediaOut(CamelModel):
    type: str
    url: str
    thumbnail: Optional[str] = None


class PostOut(CamelModel):
    id: PyObjectId
    author: Optional[AuthorPreview] = None
    caption: str = ""
    content: str = ""
    media: List[MediaOut] = []
    post_type: str = "text"
    tags: List[str] = []
    location: Optional[str] = None
    is_public: bool = True
    likes_count: int = 0
    comments_count: int = 0
    shares_count: int = 0
    is_liked: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PostResponse(CamelModel):
    post: PostOut


class FeedResponse(CamelModel):
    posts: List[PostOut]
    next_cursor: Optional[str] = None


class LikeResponse(CamelModel):
    likes_count: int
    liked: bool


# ---------- Comments ----------
class CommentCreateRequest(CamelModel):
    content: str = Field(min_length=1, max_length=500)


class CommentOut(CamelModel):
    id: PyObjectId
    post_id: PyObjectId
    author: Optional[AuthorPreview] = None
    content: str
    likes_count: int = 0
    is_liked: bool = False
    created_at: Optional[datetime] = None


class CommentResponse(CamelModel):
    comment: CommentOut


class CommentsResponse(CamelModel):
    comments: List[CommentOut]
    next_cursor: Optional[str] = None
