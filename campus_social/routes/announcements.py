# campus_social/routes/announcements.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..controllers.announcement_controller import (
    create_announcement,
    deactivate_announcement,
    get_announcement,
    list_announcements,
    update_announcement,
    user_announcements,
    view_announcement,
)
from ..schemas._base import MessageResponse
from ..schemas.announcement_schema import (
    AnnouncementCategory,
    AnnouncementCreateRequest,
    AnnouncementPriority,
    AnnouncementResponse,
    AnnouncementsResponse,
    AnnouncementUpdateRequest,
    AnnouncementViewResponse,
    TargetAudience,
)
from ..utils.auth_utils import get_current_user, get_optional_user
from ..utils.pagination import PageParams, pagination

router = APIRouter(prefix="/announcements", tags=["Announcements"])


@router.post(
    "",
    response_model=AnnouncementResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Publish an announcement",
)
async def create_new_announcement(
    payload: AnnouncementCreateRequest,
    current_user: dict = Depends(get_current_user),
):
    return AnnouncementResponse(announcement=await create_announcement(payload, current_user))


@router.get("", response_model=AnnouncementsResponse, summary="Live announcements, most urgent first")
async def get_announcements(
    category: Optional[AnnouncementCategory] = None,
    priority: Optional[AnnouncementPriority] = None,
    target_audience: Optional[TargetAudience] = Query(None, alias="targetAudience"),
    params: PageParams = Depends(pagination(10)),
    viewer: Optional[dict] = Depends(get_optional_user),
):
    return await list_announcements(params, category, priority, target_audience, viewer)


@router.get("/user/{user_id}", response_model=AnnouncementsResponse, summary="Announcements by a user")
async def get_user_announcements(
    user_id: str,
    params: PageParams = Depends(pagination(10)),
    viewer: Optional[dict] = Depends(get_optional_user),
):
    return await user_announcements(user_id, params, viewer)


@router.get("/{announcement_id}", response_model=AnnouncementResponse, summary="Get an announcement")
async def get_single_announcement(
    announcement_id: str,
    viewer: Optional[dict] = Depends(get_optional_user),
):
    return AnnouncementResponse(announcement=await get_announcement(announcement_id, viewer))


@router.post("/{announcement_id}/view", response_model=AnnouncementViewResponse, summary="Mark as viewed")
async def view_single_announcement(announcement_id: str, current_user: dict = Depends(get_current_user)):
    return await view_announcement(announcement_id, current_user)


@router.put("/{announcement_id}", response_model=AnnouncementResponse, summary="Update my announcement")
async def update_my_announcement(
    announcement_id: str,
    payload: AnnouncementUpdateRequest,
    current_user: dict = Depends(get_current_user),
):
    return AnnouncementResponse(announcement=await update_announcement(announcement_id, payload, current_user))


@router.delete("/{announcement_id}", response_model=MessageResponse, summary="Deactivate my announcement")
async def deactivate_my_announcement(announcement_id: str, current_user: dict = Depends(get_current_user)):
    return await deactivate_announcement(announcement_id, current_user)
