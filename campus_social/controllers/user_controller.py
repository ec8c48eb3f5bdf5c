# campus_social/controllers/user_controller.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Optional

from bson import ObjectId

from ..db.mongo import users_collection, follows_collection
from ..schemas.auth_schema import UserOut
from ..schemas.user_schema import ProfileOut, ProfileUpdateRequest
from ..utils.errors import NotFoundError
from ..utils.object_id import ensure_oid
from ..utils.text import clean

PREVIEW_PROJECTION = {"name": 1, "avatar_url": 1}


# ---------------------------
# Helpers
# ---------------------------

def preview(user_doc: Optional[dict]) -> Optional[dict]:
    if not user_doc:
        return None
    return {
        "id": str(user_doc["_id"]),
        "name": user_doc.get("name"),
        "avatar_url": user_doc.get("avatar_url") or "",
    }


async def author_previews(ids: Iterable[str]) -> Dict[str, dict]:
    """One `$in` lookup for a page worth of authors: {user_id: preview}."""
    oids = {ObjectId(i) for i in ids if i and ObjectId.is_valid(str(i))}
    if not oids:
        return {}
    out: Dict[str, dict] = {}
    async for doc in users_collection.find({"_id": {"$in": list(oids)}}, PREVIEW_PROJECTION):
        out[str(doc["_id"])] = preview(doc)
    return out


def user_out(user: dict) -> UserOut:
    return UserOut(
        id=str(user["_id"]),
        name=user.get("name", ""),
        email=user["email"],
        avatar_url=user.get("avatar_url") or "",
        bio=user.get("bio") or "",
        followers_count=int(user.get("followers_count", 0)),
        following_count=int(user.get("following_count", 0)),
        posts_count=int(user.get("posts_count", 0)),
    )


async def get_user_or_404(user_id: str) -> dict:
    oid = ensure_oid(user_id, "user")
    user = await users_collection.find_one({"_id": oid}, {"password": 0})
    if not user:
        raise NotFoundError("User not found")
    return user


# ---------------------------
# Profile
# ---------------------------

async def get_profile(user_id: str, viewer: Optional[dict]) -> ProfileOut:
    user = await get_user_or_404(user_id)

    is_current_user = bool(viewer) and str(viewer["_id"]) == str(user["_id"])
    is_following = False
    if viewer and not is_current_user:
        edge = await follows_collection.find_one(
            {"follower_id": str(viewer["_id"]), "following_id": str(user["_id"])},
            {"_id": 1},
        )
        is_following = edge is not None

    return ProfileOut(
        id=str(user["_id"]),
        name=user.get("name", ""),
        email=user.get("email", ""),
        role=user.get("role") or "student",
        department=user.get("department"),
        year=user.get("year"),
        location=user.get("location"),
        website=user.get("website"),
        bio=user.get("bio") or "",
        avatar_url=user.get("avatar_url") or "",
        cover_url=user.get("cover_url") or "",
        is_verified=bool(user.get("is_verified", False)),
        is_following=is_following,
        is_current_user=is_current_user,
        followers_count=int(user.get("followers_count", 0)),
        following_count=int(user.get("following_count", 0)),
        posts_count=int(user.get("posts_count", 0)),
        joined_date=user.get("created_at"),
    )


async def update_profile(current_user: dict, data: ProfileUpdateRequest) -> UserOut:
    update_data = {}
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        if field in ("avatar_url", "cover_url"):
            update_data[field] = str(value)
        elif field in ("name", "bio"):
            update_data[field] = clean(value)
        else:
            update_data[field] = value.strip()

    if update_data:
        update_data["updated_at"] = datetime.utcnow()
        await users_collection.update_one({"_id": current_user["_id"]}, {"$set": update_data})

    updated = await users_collection.find_one({"_id": current_user["_id"]})
    return user_out(updated)
