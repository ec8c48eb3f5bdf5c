# campus_social/routes/search.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..controllers.search_controller import (
    recent_searches,
    save_search,
    search,
    search_events,
    search_hashtags,
    search_posts,
    search_users,
    suggestions,
    trending,
)
from ..schemas.search_schema import (
    EventSearchResponse,
    HashtagSearchResponse,
    PostSearchResponse,
    RecentSearchesResponse,
    SaveSearchRequest,
    SearchFilters,
    SearchResponse,
    SearchSort,
    SearchType,
    SuggestionsResponse,
    TrendingResponse,
    UserSearchResponse,
)
from ..schemas._base import MessageResponse
from ..utils.auth_utils import get_current_user

router = APIRouter(prefix="/search", tags=["Search"])


def search_filters(
    type: SearchType = Query("all"),
    sort: SearchSort = Query("relevance"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> SearchFilters:
    return SearchFilters(type=type, sort=sort, limit=limit, offset=offset)


@router.get("", response_model=SearchResponse, summary="Search users, posts, hashtags and events")
async def search_all(
    q: Optional[str] = None,
    filters: SearchFilters = Depends(search_filters),
    current_user: dict = Depends(get_current_user),
):
    return await search(q, filters, current_user)


@router.get("/users", response_model=UserSearchResponse, summary="Search users")
async def search_users_route(
    q: Optional[str] = None,
    filters: SearchFilters = Depends(search_filters),
    current_user: dict = Depends(get_current_user),
):
    return await search_users(q, filters)


@router.get("/posts", response_model=PostSearchResponse, summary="Search public posts")
async def search_posts_route(
    q: Optional[str] = None,
    filters: SearchFilters = Depends(search_filters),
    current_user: dict = Depends(get_current_user),
):
    return await search_posts(q, filters, current_user)


@router.get("/hashtags", response_model=HashtagSearchResponse, summary="Search hashtags")
async def search_hashtags_route(
    q: Optional[str] = None,
    filters: SearchFilters = Depends(search_filters),
    current_user: dict = Depends(get_current_user),
):
    return await search_hashtags(q, filters)


@router.get("/events", response_model=EventSearchResponse, summary="Search public events")
async def search_events_route(
    q: Optional[str] = None,
    filters: SearchFilters = Depends(search_filters),
    current_user: dict = Depends(get_current_user),
):
    return await search_events(q, filters, current_user)


@router.get("/suggestions", response_model=SuggestionsResponse, summary="Type-ahead suggestions")
async def search_suggestions(
    q: Optional[str] = None,
    limit: int = Query(3, ge=1, le=10),
    current_user: dict = Depends(get_current_user),
):
    return await suggestions(q, limit)


@router.get("/trending", response_model=TrendingResponse, summary="Trending hashtags of the last week")
async def trending_hashtags(
    limit: int = Query(10, ge=1, le=50),
    current_user: dict = Depends(get_current_user),
):
    return await trending(limit)


@router.get("/recent", response_model=RecentSearchesResponse, summary="My recent searches, newest first")
async def get_recent_searches(current_user: dict = Depends(get_current_user)):
    return await recent_searches(current_user)


@router.post("/save", response_model=MessageResponse, summary="Remember a search query")
async def save_search_query(payload: SaveSearchRequest, current_user: dict = Depends(get_current_user)):
    return await save_search(payload.query, current_user)
