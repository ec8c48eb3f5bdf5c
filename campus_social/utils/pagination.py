# campus_social/utils/pagination.py
"""
Feed paging.

`page`/`limit` keep the offset contract existing clients use. Offsets drift
when newer items are inserted between requests (items repeat or get
skipped), so every page also returns `nextCursor`: an opaque token for the
last item's (created_at, _id). Passing it back as `cursor` continues
strictly after that item regardless of concurrent inserts.
"""
import base64
import binascii
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Query

from ..config import MAX_PAGE_SIZE
from .errors import ValidationError


@dataclass
class FeedCursor:
    created_at: datetime
    id: ObjectId


@dataclass
class PageParams:
    page: int = 1
    limit: int = 10
    cursor: Optional[str] = None

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def encode_cursor(created_at: datetime, oid) -> str:
    raw = f"{created_at.isoformat()}|{oid}"
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def decode_cursor(value: str) -> FeedCursor:
    try:
        raw = base64.urlsafe_b64decode(value.encode("ascii")).decode("utf-8")
        ts, oid = raw.split("|", 1)
        return FeedCursor(created_at=datetime.fromisoformat(ts), id=ObjectId(oid))
    except (ValueError, UnicodeError, binascii.Error, InvalidId):
        raise ValidationError("Invalid cursor")


def pagination(default_limit: int = 10):
    """Builds a FastAPI dependency with a per-route default page size."""

    def _dependency(
        page: int = Query(1, ge=1),
        limit: int = Query(default_limit, ge=1),
        cursor: Optional[str] = Query(None),
    ) -> PageParams:
        return PageParams(page=page, limit=min(limit, MAX_PAGE_SIZE), cursor=cursor or None)

    return _dependency


def after_cursor(query: dict, cursor: FeedCursor, sort_field: str = "created_at") -> dict:
    return {
        "$and": [
            query,
            {
                "$or": [
                    {sort_field: {"$lt": cursor.created_at}},
                    {sort_field: cursor.created_at, "_id": {"$lt": cursor.id}},
                ]
            },
        ]
    }


async def fetch_page(
    collection,
    query: dict,
    params: PageParams,
    sort_field: str = "created_at",
) -> Tuple[List[dict], Optional[str]]:
    """Newest-first page of `query`; returns (docs, next_cursor)."""
    skip = params.skip
    if params.cursor:
        query = after_cursor(query, decode_cursor(params.cursor), sort_field)
        skip = 0

    cursor = (
        collection.find(query)
        .sort([(sort_field, -1), ("_id", -1)])
        .skip(skip)
        .limit(params.limit)
    )
    docs = await cursor.to_list(length=params.limit)

    next_cursor = None
    if docs and len(docs) == params.limit:
        last = docs[-1]
        next_cursor = encode_cursor(last[sort_field], last["_id"])
    return docs, next_cursor
