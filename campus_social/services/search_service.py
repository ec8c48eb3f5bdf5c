# campus_social/services/search_service.py
"""
Search across users, posts, hashtags and events.

Callers depend on `SearchBackend`; `MongoRegexSearch` is the shipped
implementation (escaped case-insensitive regex per collection, hashtag
counts aggregated in-process). A real index can replace it through
`set_search_backend` without touching the routes.
"""
from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from ..db.mongo import events_collection, posts_collection, users_collection
from ..schemas.search_schema import HashtagHit, SearchFilters, SearchResults, Suggestion, UserHit
from ..utils.text import normalize_tag, search_regex

logger = logging.getLogger(__name__)

# Upper bound of candidates ranked in memory per collection
SCAN_LIMIT = 500
HASHTAG_SCAN_LIMIT = 2000
TRENDING_WINDOW_DAYS = 7

USER_PROJECTION = {
    "name": 1, "avatar_url": 1, "bio": 1, "role": 1, "department": 1,
    "followers_count": 1, "is_verified": 1, "created_at": 1,
}


class SearchBackend:
    async def search(self, query: str, filters: SearchFilters, viewer: Optional[dict] = None) -> SearchResults:
        raise NotImplementedError

    async def users(self, query: str, filters: SearchFilters) -> Tuple[List[UserHit], int]:
        raise NotImplementedError

    async def posts(self, query: str, filters: SearchFilters, viewer: Optional[dict] = None):
        raise NotImplementedError

    async def hashtags(self, query: str, filters: SearchFilters) -> Tuple[List[HashtagHit], int]:
        raise NotImplementedError

    async def events(self, query: str, filters: SearchFilters, viewer: Optional[dict] = None):
        raise NotImplementedError

    async def suggestions(self, query: str, limit: int = 3) -> List[Suggestion]:
        raise NotImplementedError

    async def trending(self, limit: int = 10) -> List[HashtagHit]:
        raise NotImplementedError


def _prefix_rank(value: Optional[str], q: str) -> int:
    return 0 if (value or "").lower().startswith(q.lower()) else 1


def _ts(value: Optional[datetime]) -> float:
    return value.timestamp() if value else 0.0


def _window(items: list, filters: SearchFilters) -> list:
    return items[filters.offset: filters.offset + filters.limit]


class MongoRegexSearch(SearchBackend):

    async def _candidates(self, collection, query: dict, filters: SearchFilters, recent_field: str, projection=None):
        """
        `recent`: newest-first page straight from Mongo.
        `relevance`: up to SCAN_LIMIT matches, ranked by the caller.
        """
        total = await collection.count_documents(query)
        if filters.sort == "recent":
            docs = await (
                collection.find(query, projection)
                .sort([(recent_field, -1), ("_id", -1)])
                .skip(filters.offset)
                .limit(filters.limit)
                .to_list(length=filters.limit)
            )
            return docs, total, True
        docs = await collection.find(query, projection).limit(SCAN_LIMIT).to_list(length=SCAN_LIMIT)
        return docs, total, False

    # ---------------------------
    # Users
    # ---------------------------
    async def users(self, query: str, filters: SearchFilters) -> Tuple[List[UserHit], int]:
        rx = search_regex(query)
        mongo_q = {"$or": [{"name": rx}, {"email": rx}, {"department": rx}]}
        docs, total, paged = await self._candidates(users_collection, mongo_q, filters, "created_at", USER_PROJECTION)
        if not paged:
            docs.sort(key=lambda d: (_prefix_rank(d.get("name"), query), -int(d.get("followers_count", 0))))
            docs = _window(docs, filters)
        hits = [
            UserHit(
                id=str(d["_id"]),
                name=d.get("name", ""),
                avatar_url=d.get("avatar_url") or "",
                bio=d.get("bio") or "",
                role=d.get("role"),
                department=d.get("department"),
                followers_count=int(d.get("followers_count", 0)),
                is_verified=bool(d.get("is_verified", False)),
            )
            for d in docs
        ]
        return hits, total

    # ---------------------------
    # Posts
    # ---------------------------
    async def posts(self, query: str, filters: SearchFilters, viewer: Optional[dict] = None):
        from ..controllers.post_controller import present_posts

        rx = search_regex(query)
        tag = normalize_tag(query)
        mongo_q = {
            "is_public": True,
            "$or": [{"caption": rx}, {"content": rx}, {"tags": search_regex(tag or query)}],
        }
        docs, total, paged = await self._candidates(posts_collection, mongo_q, filters, "created_at")
        if not paged:
            docs.sort(key=lambda d: (
                0 if tag in d.get("tags", []) else 1,
                -int(d.get("likes_count", 0)),
                -_ts(d.get("created_at")),
            ))
            docs = _window(docs, filters)
        return await present_posts(docs, viewer), total

    # ---------------------------
    # Hashtags (aggregated in-process)
    # ---------------------------
    async def _tag_counts(self, mongo_q: dict, match=None) -> Dict[str, HashtagHit]:
        counts: Counter = Counter()
        last_used: Dict[str, datetime] = {}
        cursor = (
            posts_collection.find(mongo_q, {"tags": 1, "created_at": 1})
            .sort("created_at", -1)
            .limit(HASHTAG_SCAN_LIMIT)
        )
        async for doc in cursor:
            for t in doc.get("tags", []):
                if match is not None and not match(t):
                    continue
                counts[t] += 1
                created = doc.get("created_at")
                if created and (t not in last_used or created > last_used[t]):
                    last_used[t] = created
        return {
            name: HashtagHit(name=f"#{name}", posts_count=n, last_used=last_used.get(name))
            for name, n in counts.items()
        }

    async def hashtags(self, query: str, filters: SearchFilters) -> Tuple[List[HashtagHit], int]:
        tag = normalize_tag(query)
        if not tag:
            return [], 0
        hits = await self._tag_counts(
            {"is_public": True, "tags": search_regex(tag)},
            match=lambda t: tag in t,
        )
        ranked = list(hits.items())
        if filters.sort == "recent":
            ranked.sort(key=lambda kv: -_ts(kv[1].last_used))
        else:
            ranked.sort(key=lambda kv: (_prefix_rank(kv[0], tag), -kv[1].posts_count, kv[0]))
        return _window([h for _, h in ranked], filters), len(ranked)

    # ---------------------------
    # Events
    # ---------------------------
    async def events(self, query: str, filters: SearchFilters, viewer: Optional[dict] = None):
        from ..controllers.event_controller import present_events

        rx = search_regex(query)
        mongo_q = {
            "is_public": True,
            "is_cancelled": False,
            "$or": [{"title": rx}, {"description": rx}, {"location": rx}, {"tags": search_regex(normalize_tag(query) or query)}],
        }
        docs, total, paged = await self._candidates(events_collection, mongo_q, filters, "created_at")
        if not paged:
            docs.sort(key=lambda d: (_prefix_rank(d.get("title"), query), -int(d.get("attendees_count", 0))))
            docs = _window(docs, filters)
        return await present_events(docs, viewer), total

    # ---------------------------
    # Combined
    # ---------------------------
    async def search(self, query: str, filters: SearchFilters, viewer: Optional[dict] = None) -> SearchResults:
        results = SearchResults()
        wanted = filters.type
        if wanted in ("all", "users"):
            results.users, n = await self.users(query, filters)
            results.total += n
        if wanted in ("all", "posts"):
            results.posts, n = await self.posts(query, filters, viewer)
            results.total += n
        if wanted in ("all", "hashtags"):
            results.hashtags, n = await self.hashtags(query, filters)
            results.total += n
        if wanted in ("all", "events"):
            results.events, n = await self.events(query, filters, viewer)
            results.total += n
        logger.debug("search %r type=%s -> %d hits", query, wanted, results.total)
        return results

    async def suggestions(self, query: str, limit: int = 3) -> List[Suggestion]:
        top = SearchFilters(limit=limit)
        out: List[Suggestion] = []
        users, _ = await self.users(query, top)
        out += [
            Suggestion(type="user", id=u.id, name=u.name, subtitle=u.department or u.role)
            for u in users
        ]
        tags, _ = await self.hashtags(query, top)
        out += [Suggestion(type="hashtag", name=t.name, subtitle=f"{t.posts_count} posts") for t in tags]
        events, _ = await self.events(query, top)
        out += [
            Suggestion(type="event", id=e.id, name=e.title, subtitle=e.start_date.strftime("%b %d, %Y"))
            for e in events
        ]
        return out

    async def trending(self, limit: int = 10) -> List[HashtagHit]:
        since = datetime.utcnow() - timedelta(days=TRENDING_WINDOW_DAYS)
        hits = await self._tag_counts({"is_public": True, "created_at": {"$gte": since}})
        ranked = sorted(hits.values(), key=lambda h: (-h.posts_count, h.name))
        return ranked[:limit]


_backend: SearchBackend = MongoRegexSearch()


def get_search_backend() -> SearchBackend:
    return _backend


def set_search_backend(backend: SearchBackend) -> None:
    global _backend
    _backend = backend
