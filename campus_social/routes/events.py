# campus_social/routes/events.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..controllers.event_controller import (
    cancel_event,
    create_event,
    get_event,
    list_events,
    toggle_rsvp,
    update_event,
    user_events,
)
from ..schemas._base import MessageResponse
from ..schemas.event_schema import (
    EventCreateRequest,
    EventResponse,
    EventsResponse,
    EventUpdateRequest,
    RsvpResponse,
)
from ..utils.auth_utils import get_current_user, get_optional_user
from ..utils.pagination import PageParams, pagination

router = APIRouter(prefix="/events", tags=["Events"])


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an event",
)
async def create_new_event(payload: EventCreateRequest, current_user: dict = Depends(get_current_user)):
    return EventResponse(event=await create_event(payload, current_user))


@router.get("", response_model=EventsResponse, summary="Public events by start date")
async def get_events(
    category: Optional[str] = None,
    upcoming: bool = Query(False),
    params: PageParams = Depends(pagination(10)),
    viewer: Optional[dict] = Depends(get_optional_user),
):
    return EventsResponse(events=await list_events(params, category, upcoming, viewer))


@router.get("/user/{user_id}", response_model=EventsResponse, summary="Events organized by a user")
async def get_user_events(
    user_id: str,
    params: PageParams = Depends(pagination(10)),
    viewer: Optional[dict] = Depends(get_optional_user),
):
    return EventsResponse(events=await user_events(user_id, params, viewer))


@router.get("/{event_id}", response_model=EventResponse, summary="Get an event")
async def get_single_event(event_id: str, viewer: Optional[dict] = Depends(get_optional_user)):
    return EventResponse(event=await get_event(event_id, viewer))


@router.put("/{event_id}", response_model=EventResponse, summary="Update my event")
async def update_my_event(
    event_id: str,
    payload: EventUpdateRequest,
    current_user: dict = Depends(get_current_user),
):
    return EventResponse(event=await update_event(event_id, payload, current_user))


@router.delete("/{event_id}", response_model=MessageResponse, summary="Cancel my event")
async def cancel_my_event(event_id: str, current_user: dict = Depends(get_current_user)):
    return await cancel_event(event_id, current_user)


@router.post("/{event_id}/rsvp", response_model=RsvpResponse, summary="Toggle attendance")
async def rsvp_event(event_id: str, current_user: dict = Depends(get_current_user)):
    return await toggle_rsvp(event_id, current_user)
