from datetime import datetime
from typing import List, Optional
from pydantic import AnyHttpUrl, Field

from ._base import CamelModel, PyObjectId


class ProfileOut(CamelModel):
    id: PyObjectId
    name: str
    email: str
    role: str = "student"
    department: Optional[str] = None
    year: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    bio: str = ""
    avatar_url: str = ""
    cover_url: str = ""
    is_verified: bool = False
    is_following: bool = False
    is_current_user: bool = False
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0
    joined_date: Optional[datetime] = None


class ProfileResponse(CamelModel):
    user: ProfileOut


class ProfileUpdateRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    bio: Optional[str] = Field(default=None, max_length=150)
    avatar_url: Optional[AnyHttpUrl] = None
    cover_url: Optional[AnyHttpUrl] = None
    department: Optional[str] = Field(default=None, max_length=100)
    year: Optional[str] = Field(default=None, max_length=20)
    location: Optional[str] = Field(default=None, max_length=100)
    website: Optional[str] = Field(default=None, max_length=200)


# ---------- Follow graph ----------
class FollowEntry(CamelModel):
    id: PyObjectId
    name: str
    avatar_url: Optional[str] = ""
    bio: Optional[str] = ""
    followers_count: int = 0
    following_count: int = 0
    followed_at: datetime


class FollowersResponse(CamelModel):
    followers: List[FollowEntry]


class FollowingResponse(CamelModel):
    following: List[FollowEntry]
