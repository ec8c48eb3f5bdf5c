# campus_social/routes/notifications.py
from fastapi import APIRouter, Depends, Query

from ..controllers.notification_controller import list_notifications, mark_all_read, mark_read
from ..schemas.notification_schema import MarkReadResponse, NotificationsResponse
from ..utils.auth_utils import get_current_user
from ..utils.pagination import PageParams, pagination

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationsResponse, summary="My notifications, newest first")
async def get_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    params: PageParams = Depends(pagination(20)),
    current_user: dict = Depends(get_current_user),
):
    return await list_notifications(current_user, params, unread_only)


@router.post("/read-all", response_model=MarkReadResponse, summary="Mark all notifications read")
async def read_all(current_user: dict = Depends(get_current_user)):
    return await mark_all_read(current_user)


@router.post("/{notification_id}/read", response_model=MarkReadResponse, summary="Mark one notification read")
async def read_one(notification_id: str, current_user: dict = Depends(get_current_user)):
    return await mark_read(notification_id, current_user)
