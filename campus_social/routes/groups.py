# campus_social/routes/groups.py
from typing import Optional

from fastapi import APIRouter, Depends, status

from ..controllers.group_controller import (
    create_group,
    delete_group,
    get_group,
    list_groups,
    toggle_group_membership,
    user_groups,
)
from ..schemas._base import MessageResponse
from ..schemas.group_schema import GroupCreateRequest, GroupResponse, GroupsResponse, MembershipResponse
from ..utils.auth_utils import get_current_user, get_optional_user
from ..utils.pagination import PageParams, pagination

router = APIRouter(prefix="/groups", tags=["Groups"])


@router.post(
    "",
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a group",
)
async def create_new_group(payload: GroupCreateRequest, current_user: dict = Depends(get_current_user)):
    return GroupResponse(group=await create_group(payload, current_user))


@router.get("", response_model=GroupsResponse, summary="Browse public groups")
async def get_groups(
    category: Optional[str] = None,
    params: PageParams = Depends(pagination(10)),
    viewer: Optional[dict] = Depends(get_optional_user),
):
    return GroupsResponse(groups=await list_groups(params, category, viewer))


@router.get("/user/{user_id}", response_model=GroupsResponse, summary="Groups a user belongs to")
async def get_user_groups(user_id: str, viewer: Optional[dict] = Depends(get_optional_user)):
    return GroupsResponse(groups=await user_groups(user_id, viewer))


@router.get("/{group_id}", response_model=GroupResponse, summary="Get a group")
async def get_single_group(group_id: str, viewer: Optional[dict] = Depends(get_optional_user)):
    return GroupResponse(group=await get_group(group_id, viewer))


@router.delete("/{group_id}", response_model=MessageResponse, summary="Delete my group")
async def delete_my_group(group_id: str, current_user: dict = Depends(get_current_user)):
    return await delete_group(group_id, current_user)


@router.post("/{group_id}/join", response_model=MembershipResponse, summary="Join or leave a group")
async def join_group(group_id: str, current_user: dict = Depends(get_current_user)):
    return await toggle_group_membership(group_id, current_user)
