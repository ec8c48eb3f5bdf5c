# campus_social/controllers/group_controller.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from ..db.mongo import groups_collection
from ..models.group_model import GroupModel
from ..schemas.group_schema import GroupCreateRequest, GroupOut, MembershipResponse
from ..services.notify import notify
from ..utils.counted import is_member, toggle_membership
from ..utils.errors import NotFoundError, ValidationError
from ..utils.object_id import ensure_oid
from ..utils.ownership import ensure_owner
from ..utils.pagination import PageParams
from ..utils.text import clean, normalize_tag
from .user_controller import author_previews


def _group_out(doc: dict, authors: dict, viewer: Optional[dict] = None) -> GroupOut:
    return GroupOut(
        id=str(doc["_id"]),
        creator=authors.get(doc.get("creator_id")),
        name=doc["name"],
        description=doc["description"],
        category=doc.get("category", "other"),
        privacy=doc.get("privacy", "public"),
        members_count=int(doc.get("members_count", 0)),
        is_member=bool(viewer) and is_member(doc, "members", str(viewer["_id"])),
        rules=list(doc.get("rules", [])),
        tags=list(doc.get("tags", [])),
        created_at=doc.get("created_at"),
    )


async def _present(docs: List[dict], viewer: Optional[dict] = None) -> List[GroupOut]:
    authors = await author_previews(d.get("creator_id") for d in docs)
    return [_group_out(d, authors, viewer) for d in docs]


async def _get_group_or_404(group_id: str) -> dict:
    oid = ensure_oid(group_id, "group")
    group = await groups_collection.find_one({"_id": oid, "is_active": True})
    if not group:
        raise NotFoundError("Group not found")
    return group


async def create_group(data: GroupCreateRequest, current_user: dict) -> GroupOut:
    me = str(current_user["_id"])
    doc = GroupModel(
        creator_id=me,
        name=clean(data.name),
        description=clean(data.description),
        category=data.category,
        privacy=data.privacy,
        admins=[me],
        members=[me],
        members_count=1,
        rules=[clean(r) for r in data.rules if r.strip()],
        tags=[t for t in (normalize_tag(x) for x in data.tags) if t],
    ).model_dump(exclude={"id"})
    result = await groups_collection.insert_one(doc)
    doc["_id"] = result.inserted_id
    return (await _present([doc], current_user))[0]


async def list_groups(params: PageParams, category: Optional[str] = None, viewer: Optional[dict] = None) -> List[GroupOut]:
    query: dict = {"is_active": True, "privacy": {"$ne": "private"}}
    if category:
        query["category"] = category
    docs = await (
        groups_collection.find(query)
        .sort([("members_count", -1), ("_id", -1)])
        .skip(params.skip)
        .limit(params.limit)
        .to_list(length=params.limit)
    )
    return await _present(docs, viewer)


async def get_group(group_id: str, viewer: Optional[dict] = None) -> GroupOut:
    group = await _get_group_or_404(group_id)
    return (await _present([group], viewer))[0]


async def user_groups(user_id: str, viewer: Optional[dict] = None) -> List[GroupOut]:
    oid = ensure_oid(user_id, "user")
    docs = await (
        groups_collection.find({"members": str(oid), "is_active": True})
        .sort([("created_at", -1), ("_id", -1)])
        .to_list(length=None)
    )
    return await _present(docs, viewer)


async def toggle_group_membership(group_id: str, current_user: dict) -> MembershipResponse:
    group = await _get_group_or_404(group_id)
    me = str(current_user["_id"])

    if group["creator_id"] == me:
        raise ValidationError("Group creator cannot leave the group")
    if group.get("privacy") != "public" and not is_member(group, "members", me):
        # Private/restricted groups are joined through an invite flow
        raise ValidationError("This group requires an invitation")

    doc, added = await toggle_membership(
        groups_collection, group["_id"], me, "members", "members_count",
        extra_filter={"is_active": True}, not_found="Group not found",
    )
    if added is None:
        raise NotFoundError("Group not found")

    if added:
        await notify(
            recipient_id=doc["creator_id"],
            sender_id=me,
            type="group_join",
            title="New group member",
            message=f"{current_user.get('name', 'Someone')} joined {doc['name']}",
            data={"groupId": str(doc["_id"])},
        )
    else:
        await groups_collection.update_one({"_id": doc["_id"]}, {"$pull": {"admins": me}})

    return MembershipResponse(
        message="Joined group" if added else "Left group",
        members_count=int(doc.get("members_count", 0)),
        is_member=bool(added),
    )


async def delete_group(group_id: str, current_user: dict) -> dict:
    group = await _get_group_or_404(group_id)
    ensure_owner(current_user, group, owner_field="creator_id", action="delete this group")

    await groups_collection.update_one(
        {"_id": group["_id"]},
        {"$set": {"is_active": False, "updated_at": datetime.utcnow()}},
    )
    return {"message": "Group deleted successfully"}
