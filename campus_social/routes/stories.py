# campus_social/routes/stories.py
from typing import Optional

from fastapi import APIRouter, Depends, status

from ..controllers.story_controller import (
    create_story,
    delete_story,
    stories_feed,
    story_viewers,
    user_stories,
    view_story,
)
from ..schemas._base import MessageResponse
from ..schemas.story_schema import (
    StoriesFeedResponse,
    StoriesResponse,
    StoryCreateRequest,
    StoryResponse,
    StoryViewersResponse,
    StoryViewResponse,
)
from ..utils.auth_utils import get_current_user, get_optional_user
from ..utils.pagination import PageParams, pagination

router = APIRouter(prefix="/stories", tags=["Stories"])


@router.post(
    "",
    response_model=StoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post a story (expires after 24h)",
)
async def create_new_story(payload: StoryCreateRequest, current_user: dict = Depends(get_current_user)):
    return StoryResponse(story=await create_story(payload, current_user))


@router.get("/feed", response_model=StoriesFeedResponse, summary="Live stories from people I follow")
async def get_stories_feed(
    params: PageParams = Depends(pagination(50)),
    current_user: dict = Depends(get_current_user),
):
    return await stories_feed(current_user, params)


@router.get("/user/{user_id}", response_model=StoriesResponse, summary="Live stories of a user")
async def get_user_stories(user_id: str, viewer: Optional[dict] = Depends(get_optional_user)):
    return StoriesResponse(stories=await user_stories(user_id, viewer))


@router.post("/{story_id}/view", response_model=StoryViewResponse, summary="Mark a story as viewed")
async def mark_story_viewed(story_id: str, current_user: dict = Depends(get_current_user)):
    return await view_story(story_id, current_user)


@router.get("/{story_id}/viewers", response_model=StoryViewersResponse, summary="Who viewed my story")
async def get_story_viewers(story_id: str, current_user: dict = Depends(get_current_user)):
    return await story_viewers(story_id, current_user)


@router.delete("/{story_id}", response_model=MessageResponse, summary="Delete my story")
async def delete_my_story(story_id: str, current_user: dict = Depends(get_current_user)):
    return await delete_story(story_id, current_user)
