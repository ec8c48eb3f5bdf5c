# campus_social/controllers/notification_controller.py
from datetime import datetime

from ..db.mongo import notifications_collection
from ..schemas.notification_schema import MarkReadResponse, NotificationOut, NotificationsResponse
from ..utils.errors import NotFoundError
from ..utils.object_id import ensure_oid
from ..utils.pagination import PageParams, fetch_page
from .user_controller import author_previews


async def unread_count(current_user: dict) -> int:
    return await notifications_collection.count_documents(
        {"recipient_id": str(current_user["_id"]), "is_read": False}
    )


async def list_notifications(current_user: dict, params: PageParams, unread_only: bool = False) -> NotificationsResponse:
    query: dict = {"recipient_id": str(current_user["_id"])}
    if unread_only:
        query["is_read"] = False

    docs, next_cursor = await fetch_page(notifications_collection, query, params)
    senders = await author_previews(d.get("sender_id") for d in docs)

    items = [
        NotificationOut(
            id=str(d["_id"]),
            type=d["type"],
            title=d["title"],
            message=d["message"],
            sender=senders.get(d.get("sender_id")),
            data=d.get("data") or {},
            is_read=d.get("is_read", False),
            read_at=d.get("read_at"),
            created_at=d.get("created_at"),
        )
        for d in docs
    ]
    return NotificationsResponse(
        notifications=items,
        unread_count=await unread_count(current_user),
        next_cursor=next_cursor,
    )


async def mark_read(notification_id: str, current_user: dict) -> MarkReadResponse:
    oid = ensure_oid(notification_id, "notification")
    # Scoped to the recipient: someone else's notification reads as missing
    doc = await notifications_collection.find_one({"_id": oid, "recipient_id": str(current_user["_id"])})
    if not doc:
        raise NotFoundError("Notification not found")

    result = await notifications_collection.update_one(
        {"_id": oid, "is_read": False},
        {"$set": {"is_read": True, "read_at": datetime.utcnow()}},
    )
    return MarkReadResponse(message="Notification marked as read", updated=result.modified_count)


async def mark_all_read(current_user: dict) -> MarkReadResponse:
    result = await notifications_collection.update_many(
        {"recipient_id": str(current_user["_id"]), "is_read": False},
        {"$set": {"is_read": True, "read_at": datetime.utcnow()}},
    )
    return MarkReadResponse(message="All notifications marked as read", updated=result.modified_count)
