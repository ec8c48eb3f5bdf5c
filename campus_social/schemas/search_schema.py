from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from ._base import CamelModel, PyObjectId
from .event_schema import EventOut
from .post_schema import PostOut

SearchType = Literal["all", "users", "posts", "hashtags", "events"]
SearchSort = Literal["relevance", "recent"]


class SearchFilters(CamelModel):
    type: SearchType = "all"
    sort: SearchSort = "relevance"
    limit: int = 20
    offset: int = 0


class UserHit(CamelModel):
    id: PyObjectId
    name: str
    avatar_url: Optional[str] = ""
    bio: Optional[str] = ""
    role: Optional[str] = None
    department: Optional[str] = None
    followers_count: int = 0
    is_verified: bool = False


class HashtagHit(CamelModel):
    name: str
    posts_count: int
    last_used: Optional[datetime] = None


class SearchResults(CamelModel):
    users: List[UserHit] = []
    posts: List[PostOut] = []
    hashtags: List[HashtagHit] = []
    events: List[EventOut] = []
    total: int = 0


class SearchResponse(CamelModel):
    results: SearchResults
    total: int
    query: str
    filters: SearchFilters


class UserSearchResponse(CamelModel):
    results: List[UserHit]
    total: int
    query: str


class PostSearchResponse(CamelModel):
    results: List[PostOut]
    total: int
    query: str


class HashtagSearchResponse(CamelModel):
    results: List[HashtagHit]
    total: int
    query: str


class EventSearchResponse(CamelModel):
    results: List[EventOut]
    total: int
    query: str


class Suggestion(CamelModel):
    type: Literal["user", "hashtag", "event"]
    name: str
    subtitle: Optional[str] = None
    id: Optional[str] = None


class SuggestionsResponse(CamelModel):
    suggestions: List[Suggestion]


class TrendingResponse(CamelModel):
    trending: List[HashtagHit]


class SaveSearchRequest(CamelModel):
    query: str = Field(default="", max_length=200)


class RecentSearchesResponse(CamelModel):
    recent: List[str]
