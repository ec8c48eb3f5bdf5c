# campus_social/routes/users.py
from typing import Optional

from fastapi import APIRouter, Depends

from ..controllers.follow_controller import follow, list_followers, list_following, unfollow
from ..controllers.post_controller import user_posts
from ..controllers.user_controller import get_profile, update_profile
from ..schemas._base import MessageResponse
from ..schemas.auth_schema import MeResponse
from ..schemas.post_schema import FeedResponse
from ..schemas.user_schema import (
    FollowersResponse,
    FollowingResponse,
    ProfileResponse,
    ProfileUpdateRequest,
)
from ..utils.auth_utils import get_current_user, get_optional_user
from ..utils.pagination import PageParams, pagination

router = APIRouter(prefix="/users", tags=["Users"])


# ---------------------------
# Own profile (static path first so it never matches /{user_id})
# ---------------------------
@router.put("/profile", response_model=MeResponse, summary="Update my profile")
async def update_my_profile(
    payload: ProfileUpdateRequest,
    current_user: dict = Depends(get_current_user),
):
    return MeResponse(user=await update_profile(current_user, payload))


# ---------------------------
# Profiles
# ---------------------------
@router.get("/{user_id}", response_model=ProfileResponse, summary="Get a user profile")
async def get_user_profile(
    user_id: str,
    viewer: Optional[dict] = Depends(get_optional_user),
):
    return ProfileResponse(user=await get_profile(user_id, viewer))


@router.get("/{user_id}/posts", response_model=FeedResponse, summary="Posts authored by a user")
async def get_user_posts(
    user_id: str,
    params: PageParams = Depends(pagination(10)),
    viewer: Optional[dict] = Depends(get_optional_user),
):
    return await user_posts(user_id, params, viewer)


# ---------------------------
# Follow graph
# ---------------------------
@router.post("/{user_id}/follow", response_model=MessageResponse, summary="Follow a user")
async def follow_user(user_id: str, current_user: dict = Depends(get_current_user)):
    return await follow(current_user, user_id)


@router.delete("/{user_id}/follow", response_model=MessageResponse, summary="Unfollow a user")
async def unfollow_user(user_id: str, current_user: dict = Depends(get_current_user)):
    return await unfollow(current_user, user_id)


@router.get("/{user_id}/followers", response_model=FollowersResponse, summary="Users following this user")
async def get_followers(user_id: str, params: PageParams = Depends(pagination(20))):
    return FollowersResponse(followers=await list_followers(user_id, params))


@router.get("/{user_id}/following", response_model=FollowingResponse, summary="Users this user follows")
async def get_following(user_id: str, params: PageParams = Depends(pagination(20))):
    return FollowingResponse(following=await list_following(user_id, params))
