# campus_social/controllers/story_controller.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from ..db.mongo import stories_collection
from ..models.story_model import StoryModel
from ..schemas.story_schema import (
    AuthorStories,
    StoriesFeedResponse,
    StoryCreateRequest,
    StoryOut,
    StoryViewersResponse,
    StoryViewResponse,
)
from ..utils.counted import add_membership, is_member
from ..utils.errors import NotFoundError, ValidationError
from ..utils.object_id import ensure_oid
from ..utils.ownership import ensure_owner
from ..utils.pagination import PageParams
from ..utils.text import clean
from .follow_controller import following_ids
from .user_controller import author_previews


def _live_query() -> dict:
    # The TTL monitor only sweeps every minute; filter expired stories explicitly
    return {"is_active": True, "expires_at": {"$gt": datetime.utcnow()}}


def _story_out(doc: dict, authors: dict, viewer: Optional[dict] = None) -> StoryOut:
    return StoryOut(
        id=str(doc["_id"]),
        author=authors.get(doc.get("author_id")),
        content=doc.get("content", ""),
        image_url=doc.get("image_url"),
        video_url=doc.get("video_url"),
        type=doc.get("type", "text"),
        views_count=int(doc.get("views_count", 0)),
        is_viewed=bool(viewer) and is_member(doc, "views", str(viewer["_id"])),
        expires_at=doc["expires_at"],
        created_at=doc.get("created_at"),
    )


async def _get_story_or_404(story_id: str) -> dict:
    oid = ensure_oid(story_id, "story")
    story = await stories_collection.find_one({"_id": oid})
    if not story:
        raise NotFoundError("Story not found")
    return story


async def create_story(data: StoryCreateRequest, current_user: dict) -> StoryOut:
    if data.type == "image" and not data.image_url:
        raise ValidationError(
            "Image URL is required for image stories",
            errors=[{"field": "imageUrl", "message": "Required for image stories"}],
        )
    if data.type == "video" and not data.video_url:
        raise ValidationError(
            "Video URL is required for video stories",
            errors=[{"field": "videoUrl", "message": "Required for video stories"}],
        )

    doc = StoryModel(
        author_id=str(current_user["_id"]),
        content=clean(data.content),
        image_url=str(data.image_url) if data.image_url else None,
        video_url=str(data.video_url) if data.video_url else None,
        type=data.type,
    ).model_dump(exclude={"id"})
    result = await stories_collection.insert_one(doc)
    doc["_id"] = result.inserted_id

    authors = await author_previews([doc["author_id"]])
    return _story_out(doc, authors, current_user)


async def stories_feed(current_user: dict, params: PageParams) -> StoriesFeedResponse:
    """Live stories by followed users and the viewer, newest first, grouped by author."""
    me = str(current_user["_id"])
    ids = await following_ids(me)
    ids.append(me)

    query = {"author_id": {"$in": ids}, **_live_query()}
    docs = await (
        stories_collection.find(query)
        .sort([("created_at", -1), ("_id", -1)])
        .skip(params.skip)
        .limit(params.limit)
        .to_list(length=params.limit)
    )
    authors = await author_previews(d["author_id"] for d in docs)

    grouped: Dict[str, AuthorStories] = {}
    for doc in docs:
        author_id = doc["author_id"]
        if author_id not in grouped:
            grouped[author_id] = AuthorStories(author=authors.get(author_id), stories=[])
        grouped[author_id].stories.append(_story_out(doc, authors, current_user))

    return StoriesFeedResponse(stories_by_author=list(grouped.values()))


async def user_stories(user_id: str, viewer: Optional[dict] = None) -> List[StoryOut]:
    oid = ensure_oid(user_id, "user")
    docs = await (
        stories_collection.find({"author_id": str(oid), **_live_query()})
        .sort([("created_at", -1), ("_id", -1)])
        .to_list(length=None)
    )
    authors = await author_previews([str(oid)])
    return [_story_out(d, authors, viewer) for d in docs]


async def view_story(story_id: str, current_user: dict) -> StoryViewResponse:
    oid = ensure_oid(story_id, "story")
    doc, _ = await add_membership(
        stories_collection, oid, str(current_user["_id"]), "views", "views_count",
        extra_filter=_live_query(), not_found="Story not found",
    )
    return StoryViewResponse(message="Story viewed successfully", views_count=int(doc.get("views_count", 0)))


async def story_viewers(story_id: str, current_user: dict) -> StoryViewersResponse:
    story = await _get_story_or_404(story_id)
    ensure_owner(current_user, story, action="view story viewers")

    viewers = await author_previews(story.get("views", []))
    ordered = [viewers[v] for v in story.get("views", []) if v in viewers]
    return StoryViewersResponse(viewers=ordered, views_count=int(story.get("views_count", 0)))


async def delete_story(story_id: str, current_user: dict) -> dict:
    story = await _get_story_or_404(story_id)
    ensure_owner(current_user, story, action="delete this story")

    await stories_collection.update_one({"_id": story["_id"]}, {"$set": {"is_active": False}})
    return {"message": "Story deleted successfully"}
