# campus_social/controllers/search_controller.py
from datetime import datetime
from typing import Optional

from ..config import SEARCH_HISTORY_SIZE
from ..db.mongo import search_history_collection
from ..schemas.search_schema import (
    EventSearchResponse,
    HashtagSearchResponse,
    PostSearchResponse,
    RecentSearchesResponse,
    SearchFilters,
    SearchResponse,
    SuggestionsResponse,
    TrendingResponse,
    UserSearchResponse,
)
from ..services.search_service import get_search_backend
from ..utils.errors import ValidationError

MIN_SUGGESTION_LENGTH = 2


def _require_query(q: Optional[str]) -> str:
    q = (q or "").strip()
    if not q:
        raise ValidationError("Search query is required")
    return q


async def search(q: Optional[str], filters: SearchFilters, viewer: Optional[dict] = None) -> SearchResponse:
    q = _require_query(q)
    results = await get_search_backend().search(q, filters, viewer)
    return SearchResponse(results=results, total=results.total, query=q, filters=filters)


async def search_users(q: Optional[str], filters: SearchFilters) -> UserSearchResponse:
    q = _require_query(q)
    hits, total = await get_search_backend().users(q, filters)
    return UserSearchResponse(results=hits, total=total, query=q)


async def search_posts(q: Optional[str], filters: SearchFilters, viewer: Optional[dict] = None) -> PostSearchResponse:
    q = _require_query(q)
    posts, total = await get_search_backend().posts(q, filters, viewer)
    return PostSearchResponse(results=posts, total=total, query=q)


async def search_hashtags(q: Optional[str], filters: SearchFilters) -> HashtagSearchResponse:
    q = _require_query(q)
    hits, total = await get_search_backend().hashtags(q, filters)
    return HashtagSearchResponse(results=hits, total=total, query=q)


async def search_events(q: Optional[str], filters: SearchFilters, viewer: Optional[dict] = None) -> EventSearchResponse:
    q = _require_query(q)
    events, total = await get_search_backend().events(q, filters, viewer)
    return EventSearchResponse(results=events, total=total, query=q)


async def suggestions(q: Optional[str], limit: int = 3) -> SuggestionsResponse:
    q = (q or "").strip()
    if len(q) < MIN_SUGGESTION_LENGTH:
        return SuggestionsResponse(suggestions=[])
    return SuggestionsResponse(suggestions=await get_search_backend().suggestions(q, limit))


async def trending(limit: int = 10) -> TrendingResponse:
    return TrendingResponse(trending=await get_search_backend().trending(limit))


# ---------------------------
# Search history
# ---------------------------

async def save_search(q: Optional[str], current_user: dict) -> dict:
    """Records a query; repeating one moves it back to the top."""
    q = _require_query(q)
    user_id = str(current_user["_id"])
    await search_history_collection.update_one(
        {"user_id": user_id, "query_key": q.lower()},
        {"$set": {"query": q, "searched_at": datetime.utcnow()}},
        upsert=True,
    )

    stale = await (
        search_history_collection.find({"user_id": user_id}, {"_id": 1})
        .sort([("searched_at", -1), ("_id", -1)])
        .skip(SEARCH_HISTORY_SIZE)
        .to_list(length=None)
    )
    if stale:
        await search_history_collection.delete_many({"_id": {"$in": [d["_id"] for d in stale]}})
    return {"message": "Search query saved"}


async def recent_searches(current_user: dict) -> RecentSearchesResponse:
    docs = await (
        search_history_collection.find({"user_id": str(current_user["_id"])})
        .sort([("searched_at", -1), ("_id", -1)])
        .limit(SEARCH_HISTORY_SIZE)
        .to_list(length=SEARCH_HISTORY_SIZE)
    )
    return RecentSearchesResponse(recent=[d["query"] for d in docs])
