# campus_social/controllers/post_controller.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from bson import ObjectId

from ..db.mongo import comments_collection, posts_collection, users_collection
from ..models.post_model import CommentModel, MediaModel, PostModel
from ..schemas.post_schema import (
    CommentCreateRequest,
    CommentOut,
    CommentsResponse,
    FeedResponse,
    LikeResponse,
    PostCreateRequest,
    PostOut,
    PostUpdateRequest,
)
from ..services.notify import notify
from ..utils.counted import is_member, toggle_membership
from ..utils.errors import AuthorizationError, NotFoundError, ValidationError
from ..utils.object_id import ensure_oid
from ..utils.ownership import ensure_owner, owns_resource
from ..utils.pagination import PageParams, fetch_page
from ..utils.text import extract_hashtags, moderate_text
from .follow_controller import following_ids
from .user_controller import author_previews

logger = logging.getLogger(__name__)


# ---------------------------
# Helpers
# ---------------------------

def _post_type(media: List[dict]) -> str:
    if not media:
        return "text"
    if len(media) > 1:
        return "carousel"
    return media[0]["type"]


def _post_out(doc: dict, authors: dict, viewer: Optional[dict] = None) -> PostOut:
    """Return only the fields PostOut exposes (never the raw likes array)."""
    return PostOut(
        id=str(doc["_id"]),
        author=authors.get(doc.get("author_id")),
        caption=doc.get("caption", ""),
        content=doc.get("content", ""),
        media=list(doc.get("media", [])),
        post_type=doc.get("post_type", "text"),
        tags=list(doc.get("tags", [])),
        location=doc.get("location"),
        is_public=doc.get("is_public", True),
        likes_count=int(doc.get("likes_count", 0)),
        comments_count=int(doc.get("comments_count", 0)),
        shares_count=int(doc.get("shares_count", 0)),
        is_liked=bool(viewer) and is_member(doc, "likes", str(viewer["_id"])),
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


async def present_posts(docs: List[dict], viewer: Optional[dict] = None) -> List[PostOut]:
    authors = await author_previews(d.get("author_id") for d in docs)
    return [_post_out(d, authors, viewer) for d in docs]


def _comment_out(doc: dict, authors: dict, viewer: Optional[dict] = None) -> CommentOut:
    return CommentOut(
        id=str(doc["_id"]),
        post_id=doc["post_id"],
        author=authors.get(doc.get("author_id")),
        content=doc.get("content", ""),
        likes_count=int(doc.get("likes_count", 0)),
        is_liked=bool(viewer) and is_member(doc, "likes", str(viewer["_id"])),
        created_at=doc.get("created_at"),
    )


async def get_post_or_404(post_id: str) -> dict:
    oid = ensure_oid(post_id, "post")
    post = await posts_collection.find_one({"_id": oid})
    if not post:
        raise NotFoundError("Post not found")
    return post


def _is_visible(post: Optional[dict], viewer: Optional[dict]) -> bool:
    return bool(post) and (post.get("is_public", True) or owns_resource(viewer, post))


async def get_visible_post_or_404(post_id: str, viewer: Optional[dict] = None) -> dict:
    """Like get_post_or_404, but private posts are invisible to everyone but the author."""
    post = await get_post_or_404(post_id)
    if not _is_visible(post, viewer):
        raise NotFoundError("Post not found")
    return post


# ---------------------------
# Create / Read / Update / Delete
# ---------------------------

async def create_post(data: PostCreateRequest, current_user: dict) -> PostOut:
    media = [
        MediaModel(type=m.type, url=str(m.url), thumbnail=str(m.thumbnail) if m.thumbnail else None)
        for m in data.media
    ]
    if data.image_url:
        media.insert(0, MediaModel(type="image", url=str(data.image_url)))

    caption_mod = moderate_text(data.caption)
    content_mod = moderate_text(data.content)
    caption, content = caption_mod["cleaned"], content_mod["cleaned"]
    if not (caption or content or media):
        raise ValidationError(
            "Post must have a caption, content or media",
            errors=[{"field": "caption", "message": "Provide caption, content or media"}],
        )

    post = PostModel(
        author_id=str(current_user["_id"]),
        caption=caption,
        content=content,
        media=media,
        post_type=_post_type([m.model_dump() for m in media]),
        tags=extract_hashtags(caption, content, extra=data.tags),
        location=(data.location or "").strip() or None,
        is_public=data.is_public,
        is_flagged=caption_mod["flagged"] or content_mod["flagged"],
    )
    doc = post.model_dump(exclude={"id"})
    result = await posts_collection.insert_one(doc)
    doc["_id"] = result.inserted_id
    if doc["is_flagged"]:
        logger.warning("post %s by %s flagged by moderation", doc["_id"], doc["author_id"])

    await users_collection.update_one({"_id": current_user["_id"]}, {"$inc": {"posts_count": 1}})

    return (await present_posts([doc], current_user))[0]


async def get_post(post_id: str, viewer: Optional[dict] = None) -> PostOut:
    post = await get_visible_post_or_404(post_id, viewer)
    return (await present_posts([post], viewer))[0]


async def update_post(post_id: str, data: PostUpdateRequest, current_user: dict) -> PostOut:
    post = await get_post_or_404(post_id)
    ensure_owner(current_user, post, action="update this post")

    changes = data.model_dump(exclude_unset=True)
    update_data = {}
    flagged = False
    for field in ("caption", "content"):
        if changes.get(field) is not None:
            mod = moderate_text(changes[field])
            update_data[field] = mod["cleaned"]
            flagged = flagged or mod["flagged"]
    if flagged:
        update_data["is_flagged"] = True
        logger.warning("post %s flagged by moderation on update", post["_id"])
    if changes.get("location") is not None:
        update_data["location"] = changes["location"].strip() or None
    if changes.get("is_public") is not None:
        update_data["is_public"] = changes["is_public"]

    if update_data or changes.get("tags") is not None:
        update_data["tags"] = extract_hashtags(
            update_data.get("caption", post.get("caption", "")),
            update_data.get("content", post.get("content", "")),
            extra=changes.get("tags") or [],
        )
        update_data["updated_at"] = datetime.utcnow()
        await posts_collection.update_one({"_id": post["_id"]}, {"$set": update_data})

    updated = await posts_collection.find_one({"_id": post["_id"]})
    return (await present_posts([updated], current_user))[0]


async def delete_post(post_id: str, current_user: dict) -> dict:
    post = await get_post_or_404(post_id)
    ensure_owner(current_user, post, action="delete this post")

    removed = await comments_collection.delete_many({"post_id": str(post["_id"])})
    result = await posts_collection.delete_one({"_id": post["_id"]})
    if result.deleted_count:
        await users_collection.update_one({"_id": current_user["_id"]}, {"$inc": {"posts_count": -1}})
        logger.info("post %s deleted with %d comments", post["_id"], removed.deleted_count)

    return {"message": "Post deleted successfully"}


# ---------------------------
# Feeds
# ---------------------------

async def public_feed(params: PageParams, viewer: Optional[dict] = None) -> FeedResponse:
    docs, next_cursor = await fetch_page(posts_collection, {"is_public": True}, params)
    return FeedResponse(posts=await present_posts(docs, viewer), next_cursor=next_cursor)


async def following_feed(current_user: dict, params: PageParams) -> FeedResponse:
    # Two steps: edge targets, then posts IN that set
    ids = await following_ids(str(current_user["_id"]))
    if not ids:
        return FeedResponse(posts=[], next_cursor=None)

    query = {"author_id": {"$in": ids}, "is_public": True}
    docs, next_cursor = await fetch_page(posts_collection, query, params)
    return FeedResponse(posts=await present_posts(docs, current_user), next_cursor=next_cursor)


async def user_posts(user_id: str, params: PageParams, viewer: Optional[dict] = None) -> FeedResponse:
    oid = ensure_oid(user_id, "user")
    query = {"author_id": str(oid)}
    if not viewer or str(viewer["_id"]) != str(oid):
        query["is_public"] = True
    docs, next_cursor = await fetch_page(posts_collection, query, params)
    return FeedResponse(posts=await present_posts(docs, viewer), next_cursor=next_cursor)


# ---------------------------
# Likes
# ---------------------------

async def toggle_post_like(post_id: str, current_user: dict) -> LikeResponse:
    post = await get_visible_post_or_404(post_id, current_user)
    oid = post["_id"]
    user_id = str(current_user["_id"])

    # Re-checked inside the update in case the post went private meanwhile
    extra = None if owns_resource(current_user, post) else {"is_public": True}
    doc, liked = await toggle_membership(
        posts_collection, oid, user_id, "likes", "likes_count",
        extra_filter=extra, not_found="Post not found",
    )
    if liked is None:
        raise NotFoundError("Post not found")

    if liked:
        await notify(
            recipient_id=doc["author_id"],
            sender_id=user_id,
            type="like",
            title="New like",
            message=f"{current_user.get('name', 'Someone')} liked your post",
            data={"postId": str(oid)},
        )
    return LikeResponse(likes_count=int(doc.get("likes_count", 0)), liked=bool(liked))


# ---------------------------
# Comments
# ---------------------------

async def add_comment(post_id: str, data: CommentCreateRequest, current_user: dict) -> CommentOut:
    post = await get_visible_post_or_404(post_id, current_user)
    user_id = str(current_user["_id"])

    mod = moderate_text(data.content)
    if not mod["cleaned"]:
        raise ValidationError(errors=[{"field": "content", "message": "Comment cannot be empty"}])

    doc = CommentModel(
        post_id=str(post["_id"]), author_id=user_id, content=mod["cleaned"], is_flagged=mod["flagged"]
    ).model_dump(exclude={"id"})
    result = await comments_collection.insert_one(doc)
    doc["_id"] = result.inserted_id
    if doc["is_flagged"]:
        logger.warning("comment %s on post %s flagged by moderation", doc["_id"], post["_id"])

    await posts_collection.update_one({"_id": post["_id"]}, {"$inc": {"comments_count": 1}})

    await notify(
        recipient_id=post["author_id"],
        sender_id=user_id,
        type="comment",
        title="New comment",
        message=f"{current_user.get('name', 'Someone')} commented on your post",
        data={"postId": str(post["_id"]), "commentId": str(doc["_id"])},
    )

    authors = await author_previews([user_id])
    return _comment_out(doc, authors, current_user)


async def list_comments(post_id: str, params: PageParams, viewer: Optional[dict] = None) -> CommentsResponse:
    post = await get_visible_post_or_404(post_id, viewer)
    docs, next_cursor = await fetch_page(comments_collection, {"post_id": str(post["_id"])}, params)
    authors = await author_previews(d.get("author_id") for d in docs)
    return CommentsResponse(
        comments=[_comment_out(d, authors, viewer) for d in docs],
        next_cursor=next_cursor,
    )


async def delete_comment(comment_id: str, current_user: dict) -> dict:
    oid = ensure_oid(comment_id, "comment")
    comment = await comments_collection.find_one({"_id": oid})
    if not comment:
        raise NotFoundError("Comment not found")

    post = None
    if ObjectId.is_valid(comment["post_id"]):
        post = await posts_collection.find_one({"_id": ObjectId(comment["post_id"])}, {"author_id": 1})

    # Comment author, or the author of the post it sits on
    if not (owns_resource(current_user, comment) or owns_resource(current_user, post)):
        raise AuthorizationError("Not authorized to delete this comment")

    result = await comments_collection.delete_one({"_id": oid})
    if result.deleted_count and post:
        await posts_collection.update_one({"_id": post["_id"]}, {"$inc": {"comments_count": -1}})

    return {"message": "Comment deleted successfully"}


async def toggle_comment_like(comment_id: str, current_user: dict) -> LikeResponse:
    oid = ensure_oid(comment_id, "comment")
    comment = await comments_collection.find_one({"_id": oid}, {"post_id": 1})
    if not comment:
        raise NotFoundError("Comment not found")
    post = None
    if ObjectId.is_valid(comment["post_id"]):
        post = await posts_collection.find_one({"_id": ObjectId(comment["post_id"])})
    if not _is_visible(post, current_user):
        raise NotFoundError("Comment not found")

    doc, liked = await toggle_membership(
        comments_collection, oid, str(current_user["_id"]), "likes", "likes_count",
        not_found="Comment not found",
    )
    return LikeResponse(likes_count=int(doc.get("likes_count", 0)), liked=bool(liked))
