# campus_social/controllers/follow_controller.py
"""
Follow graph.

Edges in `follows` are the ground truth. `followers_count`/`following_count`
on users are a cache kept in step by one $inc per edge insert/delete (all
three writes share a transaction when MONGODB_TRANSACTIONS is on) and can be
rebuilt from the edges with `recount_user_counters`.
"""
from __future__ import annotations

import logging
from typing import List

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from ..config import FEED_FOLLOWING_CAP
from ..db.mongo import follows_collection, posts_collection, users_collection, transaction
from ..models.follow_model import FollowModel
from ..schemas.user_schema import FollowEntry
from ..services.notify import notify
from ..utils.errors import ConflictError, NotFoundError, ValidationError
from ..utils.object_id import ensure_oid
from ..utils.pagination import PageParams

logger = logging.getLogger(__name__)

ENTRY_PROJECTION = {"name": 1, "avatar_url": 1, "bio": 1, "followers_count": 1, "following_count": 1}


# -----------------------------
# Helpers
# -----------------------------
async def _user_exists(oid: ObjectId) -> bool:
    return await users_collection.find_one({"_id": oid}, {"_id": 1}) is not None


async def is_following(follower_id: str, target_id: str) -> bool:
    edge = await follows_collection.find_one(
        {"follower_id": str(follower_id), "following_id": str(target_id)}, {"_id": 1}
    )
    return edge is not None


async def following_ids(user_id: str, cap: int = FEED_FOLLOWING_CAP) -> List[str]:
    """Ids `user_id` follows, most recently followed first, at most `cap`."""
    cursor = (
        follows_collection.find({"follower_id": str(user_id)}, {"following_id": 1})
        .sort("created_at", -1)
        .limit(cap)
    )
    return [doc["following_id"] async for doc in cursor]


# -----------------------------
# Follow / Unfollow
# -----------------------------
async def follow(follower: dict, target_id: str) -> dict:
    follower_id = str(follower["_id"])
    target_oid = ensure_oid(target_id, "user")
    target_id = str(target_oid)

    if follower_id == target_id:
        raise ValidationError("Cannot follow yourself")
    if not await _user_exists(target_oid):
        raise NotFoundError("User not found")
    if await is_following(follower_id, target_id):
        raise ConflictError("Already following this user")

    edge = FollowModel(follower_id=follower_id, following_id=target_id).model_dump(exclude={"id"})
    try:
        async with transaction() as session:
            await follows_collection.insert_one(edge, session=session)
            await users_collection.update_one(
                {"_id": follower["_id"]}, {"$inc": {"following_count": 1}}, session=session
            )
            await users_collection.update_one(
                {"_id": target_oid}, {"$inc": {"followers_count": 1}}, session=session
            )
    except DuplicateKeyError:
        # Lost a race against an identical request; the unique index kept one edge
        raise ConflictError("Already following this user")

    await notify(
        recipient_id=target_id,
        sender_id=follower_id,
        type="follow",
        title="New follower",
        message=f"{follower.get('name', 'Someone')} started following you",
        data={"userId": follower_id},
    )
    return {"message": "Successfully followed user"}


async def unfollow(follower: dict, target_id: str) -> dict:
    follower_id = str(follower["_id"])
    target_oid = ensure_oid(target_id, "user")

    async with transaction() as session:
        result = await follows_collection.delete_one(
            {"follower_id": follower_id, "following_id": str(target_oid)}, session=session
        )
        if result.deleted_count == 0:
            raise NotFoundError("Not following this user")
        await users_collection.update_one(
            {"_id": follower["_id"]}, {"$inc": {"following_count": -1}}, session=session
        )
        await users_collection.update_one(
            {"_id": target_oid}, {"$inc": {"followers_count": -1}}, session=session
        )

    return {"message": "Successfully unfollowed user"}


# -----------------------------
# Listings
# -----------------------------
async def _list_edges(query: dict, counterpart_field: str, params: PageParams) -> List[FollowEntry]:
    edges = await (
        follows_collection.find(query)
        .sort([("created_at", -1), ("_id", -1)])
        .skip(params.skip)
        .limit(params.limit)
        .to_list(length=params.limit)
    )
    ids = [ObjectId(e[counterpart_field]) for e in edges if ObjectId.is_valid(e[counterpart_field])]
    users = {
        str(u["_id"]): u
        async for u in users_collection.find({"_id": {"$in": ids}}, ENTRY_PROJECTION)
    }

    out: List[FollowEntry] = []
    for edge in edges:
        u = users.get(edge[counterpart_field])
        if not u:
            # Counterpart account is gone
            continue
        out.append(
            FollowEntry(
                id=str(u["_id"]),
                name=u.get("name", ""),
                avatar_url=u.get("avatar_url") or "",
                bio=u.get("bio") or "",
                followers_count=int(u.get("followers_count", 0)),
                following_count=int(u.get("following_count", 0)),
                followed_at=edge["created_at"],
            )
        )
    return out


async def list_followers(user_id: str, params: PageParams) -> List[FollowEntry]:
    oid = ensure_oid(user_id, "user")
    return await _list_edges({"following_id": str(oid)}, "follower_id", params)


async def list_following(user_id: str, params: PageParams) -> List[FollowEntry]:
    oid = ensure_oid(user_id, "user")
    return await _list_edges({"follower_id": str(oid)}, "following_id", params)


# -----------------------------
# Maintenance
# -----------------------------
async def recount_user_counters(user_id: str) -> dict:
    """Rebuilds a user's graph/post counters from the edge and post collections."""
    oid = ensure_oid(user_id, "user")
    uid = str(oid)
    counters = {
        "followers_count": await follows_collection.count_documents({"following_id": uid}),
        "following_count": await follows_collection.count_documents({"follower_id": uid}),
        "posts_count": await posts_collection.count_documents({"author_id": uid}),
    }
    result = await users_collection.update_one({"_id": oid}, {"$set": counters})
    if result.matched_count == 0:
        raise NotFoundError("User not found")
    logger.info("recounted counters for %s: %s", uid, counters)
    return counters
