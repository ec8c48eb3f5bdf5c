from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from .user_model import PyObjectId


class MediaModel(BaseModel):
    type: str  # "image" or "video"
    url: str
    thumbnail: Optional[str] = None


class PostModel(BaseModel):
    id: Optional[PyObjectId] = Field(alias="_id", default=None)
    author_id: PyObjectId
    caption: str = ""
    content: str = ""
    media: List[MediaModel] = Field(default_factory=list)
    post_type: str = "text"  # text | image | video | carousel
    tags: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    is_public: bool = True
    is_flagged: bool = False  # profanity detected at write time

    # Counted collection: likes_count == len(likes), changed together atomically
    likes: List[PyObjectId] = Field(default_factory=list)
    likes_count: int = 0
    comments_count: int = 0
    shares_count: int = 0

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {"populate_by_name": True}


class CommentModel(BaseModel):
    id: Optional[PyObjectId] = Field(alias="_id", default=None)
    post_id: PyObjectId
    author_id: PyObjectId
    content: str
    is_flagged: bool = False
    likes: List[PyObjectId] = Field(default_factory=list)
    likes_count: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {"populate_by_name": True}
