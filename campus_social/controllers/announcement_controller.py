# campus_social/controllers/announcement_controller.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from ..db.mongo import announcements_collection
from ..models.announcement_model import PRIORITY_RANK, AnnouncementModel, AttachmentModel
from ..schemas.announcement_schema import (
    AnnouncementCreateRequest,
    AnnouncementOut,
    AnnouncementsResponse,
    AnnouncementUpdateRequest,
    AnnouncementViewResponse,
)
from ..utils.counted import add_membership, is_member
from ..utils.errors import NotFoundError, ValidationError
from ..utils.object_id import ensure_oid
from ..utils.ownership import ensure_owner, owns_resource
from ..utils.pagination import PageParams, fetch_page
from ..utils.text import clean, normalize_tag
from .user_controller import author_previews

logger = logging.getLogger(__name__)


def _live_query() -> dict:
    # Expired documents linger until the TTL monitor runs
    return {
        "is_active": True,
        "$or": [{"expires_at": None}, {"expires_at": {"$gt": datetime.utcnow()}}],
    }


def _is_live(doc: dict) -> bool:
    expires = doc.get("expires_at")
    return doc.get("is_active", True) and (expires is None or expires > datetime.utcnow())


def _check_expiry(expires_at: Optional[datetime]) -> None:
    if expires_at is not None and expires_at <= datetime.utcnow():
        raise ValidationError(errors=[{"field": "expiresAt", "message": "expiresAt must be in the future"}])


def _tags(raw: List[str]) -> List[str]:
    return [t for t in (normalize_tag(x) for x in raw) if t]


def _attachments(raw) -> List[dict]:
    return [AttachmentModel(name=a.name, url=str(a.url), type=a.type).model_dump() for a in raw]


def _announcement_out(doc: dict, authors: dict, viewer: Optional[dict] = None) -> AnnouncementOut:
    return AnnouncementOut(
        id=str(doc["_id"]),
        author=authors.get(doc.get("author_id")),
        title=doc["title"],
        content=doc["content"],
        category=doc.get("category", "general"),
        priority=doc.get("priority", "medium"),
        target_audience=doc.get("target_audience", "all"),
        target_groups=list(doc.get("target_groups", [])),
        attachments=list(doc.get("attachments", [])),
        tags=list(doc.get("tags", [])),
        is_active=doc.get("is_active", True),
        expires_at=doc.get("expires_at"),
        views_count=int(doc.get("views_count", 0)),
        is_viewed=bool(viewer) and is_member(doc, "views", str(viewer["_id"])),
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


async def present_announcements(docs: List[dict], viewer: Optional[dict] = None) -> List[AnnouncementOut]:
    authors = await author_previews(d.get("author_id") for d in docs)
    return [_announcement_out(d, authors, viewer) for d in docs]


async def _get_announcement_or_404(announcement_id: str) -> dict:
    oid = ensure_oid(announcement_id, "announcement")
    doc = await announcements_collection.find_one({"_id": oid})
    if not doc:
        raise NotFoundError("Announcement not found")
    return doc


async def create_announcement(data: AnnouncementCreateRequest, current_user: dict) -> AnnouncementOut:
    _check_expiry(data.expires_at)
    doc = AnnouncementModel(
        author_id=str(current_user["_id"]),
        title=clean(data.title),
        content=clean(data.content),
        category=data.category,
        priority=data.priority,
        priority_rank=PRIORITY_RANK[data.priority],
        target_audience=data.target_audience,
        target_groups=[g.strip() for g in data.target_groups if g.strip()],
        attachments=_attachments(data.attachments),
        tags=_tags(data.tags),
        expires_at=data.expires_at,
    ).model_dump(exclude={"id"})
    result = await announcements_collection.insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info("announcement %s created by %s (%s)", doc["_id"], doc["author_id"], doc["priority"])
    return (await present_announcements([doc], current_user))[0]


async def list_announcements(
    params: PageParams,
    category: Optional[str] = None,
    priority: Optional[str] = None,
    target_audience: Optional[str] = None,
    viewer: Optional[dict] = None,
) -> AnnouncementsResponse:
    """Live announcements, most urgent first, then newest."""
    query = _live_query()
    if category:
        query["category"] = category
    if priority:
        query["priority"] = priority
    if target_audience:
        query["target_audience"] = target_audience

    docs = await (
        announcements_collection.find(query)
        .sort([("priority_rank", -1), ("created_at", -1), ("_id", -1)])
        .skip(params.skip)
        .limit(params.limit)
        .to_list(length=params.limit)
    )
    return AnnouncementsResponse(announcements=await present_announcements(docs, viewer))


async def get_announcement(announcement_id: str, viewer: Optional[dict] = None) -> AnnouncementOut:
    doc = await _get_announcement_or_404(announcement_id)
    if not _is_live(doc) and not owns_resource(viewer, doc):
        raise NotFoundError("Announcement not found")
    return (await present_announcements([doc], viewer))[0]


async def user_announcements(
    user_id: str, params: PageParams, viewer: Optional[dict] = None
) -> AnnouncementsResponse:
    oid = ensure_oid(user_id, "user")
    query = {"author_id": str(oid)}
    if not viewer or str(viewer["_id"]) != str(oid):
        query.update(_live_query())
    docs, next_cursor = await fetch_page(announcements_collection, query, params)
    return AnnouncementsResponse(
        announcements=await present_announcements(docs, viewer),
        next_cursor=next_cursor,
    )


async def view_announcement(announcement_id: str, current_user: dict) -> AnnouncementViewResponse:
    oid = ensure_oid(announcement_id, "announcement")
    doc, _ = await add_membership(
        announcements_collection, oid, str(current_user["_id"]), "views", "views_count",
        extra_filter=_live_query(), not_found="Announcement not found",
    )
    return AnnouncementViewResponse(
        message="Announcement viewed successfully",
        views_count=int(doc.get("views_count", 0)),
    )


async def update_announcement(
    announcement_id: str, data: AnnouncementUpdateRequest, current_user: dict
) -> AnnouncementOut:
    doc = await _get_announcement_or_404(announcement_id)
    ensure_owner(current_user, doc, action="update this announcement")

    update_data = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    for field in ("title", "content"):
        if field in update_data:
            update_data[field] = clean(update_data[field])
    if "priority" in update_data:
        update_data["priority_rank"] = PRIORITY_RANK[update_data["priority"]]
    if "tags" in update_data:
        update_data["tags"] = _tags(update_data["tags"])
    if "target_groups" in update_data:
        update_data["target_groups"] = [g.strip() for g in update_data["target_groups"] if g.strip()]
    if data.attachments is not None:
        update_data["attachments"] = _attachments(data.attachments)
    if "expires_at" in update_data:
        _check_expiry(update_data["expires_at"])

    if update_data:
        update_data["updated_at"] = datetime.utcnow()
        await announcements_collection.update_one({"_id": doc["_id"]}, {"$set": update_data})

    updated = await announcements_collection.find_one({"_id": doc["_id"]})
    return (await present_announcements([updated], current_user))[0]


async def deactivate_announcement(announcement_id: str, current_user: dict) -> dict:
    doc = await _get_announcement_or_404(announcement_id)
    ensure_owner(current_user, doc, action="delete this announcement")

    await announcements_collection.update_one(
        {"_id": doc["_id"]},
        {"$set": {"is_active": False, "updated_at": datetime.utcnow()}},
    )
    return {"message": "Announcement deactivated successfully"}
