# campus_social/controllers/event_controller.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from ..db.mongo import events_collection
from ..models.event_model import EventModel
from ..schemas.event_schema import EventCreateRequest, EventOut, EventUpdateRequest, RsvpResponse
from ..services.notify import notify
from ..utils.counted import is_member, toggle_membership
from ..utils.errors import NotFoundError, ValidationError
from ..utils.object_id import ensure_oid
from ..utils.ownership import ensure_owner
from ..utils.pagination import PageParams
from ..utils.text import clean, normalize_tag
from .user_controller import author_previews


def _event_out(doc: dict, authors: dict, viewer: Optional[dict] = None) -> EventOut:
    return EventOut(
        id=str(doc["_id"]),
        organizer=authors.get(doc.get("organizer_id")),
        title=doc["title"],
        description=doc["description"],
        category=doc.get("category", "social"),
        location=doc["location"],
        start_date=doc["start_date"],
        end_date=doc["end_date"],
        image_url=doc.get("image_url"),
        max_attendees=doc.get("max_attendees"),
        attendees_count=int(doc.get("attendees_count", 0)),
        is_attending=bool(viewer) and is_member(doc, "attendees", str(viewer["_id"])),
        is_public=doc.get("is_public", True),
        is_cancelled=doc.get("is_cancelled", False),
        tags=list(doc.get("tags", [])),
        requirements=doc.get("requirements"),
        contact_info=doc.get("contact_info"),
        created_at=doc.get("created_at"),
    )


async def present_events(docs: List[dict], viewer: Optional[dict] = None) -> List[EventOut]:
    authors = await author_previews(d.get("organizer_id") for d in docs)
    return [_event_out(d, authors, viewer) for d in docs]


async def _get_event_or_404(event_id: str) -> dict:
    oid = ensure_oid(event_id, "event")
    event = await events_collection.find_one({"_id": oid})
    if not event:
        raise NotFoundError("Event not found")
    return event


async def create_event(data: EventCreateRequest, current_user: dict) -> EventOut:
    doc = EventModel(
        organizer_id=str(current_user["_id"]),
        title=clean(data.title),
        description=clean(data.description),
        category=data.category,
        location=data.location.strip(),
        start_date=data.start_date,
        end_date=data.end_date,
        image_url=str(data.image_url) if data.image_url else None,
        max_attendees=data.max_attendees,
        tags=[t for t in (normalize_tag(x) for x in data.tags) if t],
        requirements=data.requirements,
        contact_info=data.contact_info,
    ).model_dump(exclude={"id"})
    result = await events_collection.insert_one(doc)
    doc["_id"] = result.inserted_id
    return (await present_events([doc], current_user))[0]


async def list_events(
    params: PageParams,
    category: Optional[str] = None,
    upcoming: bool = False,
    viewer: Optional[dict] = None,
) -> List[EventOut]:
    query: dict = {"is_public": True, "is_cancelled": False}
    if category:
        query["category"] = category
    if upcoming:
        query["start_date"] = {"$gte": datetime.utcnow()}

    docs = await (
        events_collection.find(query)
        .sort([("start_date", 1), ("_id", 1)])
        .skip(params.skip)
        .limit(params.limit)
        .to_list(length=params.limit)
    )
    return await present_events(docs, viewer)


async def get_event(event_id: str, viewer: Optional[dict] = None) -> EventOut:
    event = await _get_event_or_404(event_id)
    return (await present_events([event], viewer))[0]


async def user_events(user_id: str, params: PageParams, viewer: Optional[dict] = None) -> List[EventOut]:
    oid = ensure_oid(user_id, "user")
    docs = await (
        events_collection.find({"organizer_id": str(oid)})
        .sort([("start_date", -1), ("_id", -1)])
        .skip(params.skip)
        .limit(params.limit)
        .to_list(length=params.limit)
    )
    return await present_events(docs, viewer)


async def update_event(event_id: str, data: EventUpdateRequest, current_user: dict) -> EventOut:
    event = await _get_event_or_404(event_id)
    ensure_owner(current_user, event, owner_field="organizer_id", action="update this event")

    update_data = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if "image_url" in update_data:
        update_data["image_url"] = str(update_data["image_url"])
    if "tags" in update_data:
        update_data["tags"] = [t for t in (normalize_tag(x) for x in update_data["tags"]) if t]
    for field in ("title", "description"):
        if field in update_data:
            update_data[field] = clean(update_data[field])

    start = update_data.get("start_date", event["start_date"])
    end = update_data.get("end_date", event["end_date"])
    if end < start:
        raise ValidationError(errors=[{"field": "endDate", "message": "endDate must not be before startDate"}])

    max_attendees = update_data.get("max_attendees")
    if max_attendees is not None and max_attendees < int(event.get("attendees_count", 0)):
        raise ValidationError(
            errors=[{"field": "maxAttendees", "message": "Cannot be lower than the current attendee count"}]
        )

    if update_data:
        update_data["updated_at"] = datetime.utcnow()
        await events_collection.update_one({"_id": event["_id"]}, {"$set": update_data})

    updated = await events_collection.find_one({"_id": event["_id"]})
    return (await present_events([updated], current_user))[0]


async def cancel_event(event_id: str, current_user: dict) -> dict:
    event = await _get_event_or_404(event_id)
    ensure_owner(current_user, event, owner_field="organizer_id", action="cancel this event")

    await events_collection.update_one(
        {"_id": event["_id"]},
        {"$set": {"is_cancelled": True, "updated_at": datetime.utcnow()}},
    )
    return {"message": "Event cancelled successfully"}


async def toggle_rsvp(event_id: str, current_user: dict) -> RsvpResponse:
    event = await _get_event_or_404(event_id)
    if event.get("is_cancelled"):
        raise ValidationError("Event is cancelled")

    # Capacity is checked inside the same conditional update that adds the attendee
    extra = {"is_cancelled": False}
    if event.get("max_attendees"):
        extra["attendees_count"] = {"$lt": int(event["max_attendees"])}

    user_id = str(current_user["_id"])
    doc, added = await toggle_membership(
        events_collection, event["_id"], user_id, "attendees", "attendees_count",
        extra_filter=extra, not_found="Event not found",
    )
    if added is None:
        if doc.get("is_cancelled"):
            raise ValidationError("Event is cancelled")
        raise ValidationError("Event is full")

    if added:
        await notify(
            recipient_id=doc["organizer_id"],
            sender_id=user_id,
            type="event_rsvp",
            title="New RSVP",
            message=f"{current_user.get('name', 'Someone')} is attending {doc['title']}",
            data={"eventId": str(doc["_id"])},
        )

    return RsvpResponse(
        message="RSVP added" if added else "RSVP removed",
        attendees_count=int(doc.get("attendees_count", 0)),
        is_attending=bool(added),
    )
