# campus_social/routes/posts.py
from typing import Optional

from fastapi import APIRouter, Depends, status

from ..controllers.post_controller import (
    add_comment,
    create_post,
    delete_comment,
    delete_post,
    following_feed,
    get_post,
    list_comments,
    public_feed,
    toggle_comment_like,
    toggle_post_like,
    update_post,
)
from ..schemas._base import MessageResponse
from ..schemas.post_schema import (
    CommentCreateRequest,
    CommentResponse,
    CommentsResponse,
    FeedResponse,
    LikeResponse,
    PostCreateRequest,
    PostResponse,
    PostUpdateRequest,
)
from ..utils.auth_utils import get_current_user, get_optional_user
from ..utils.pagination import PageParams, pagination

router = APIRouter(prefix="/posts", tags=["Posts"])


# ---------------------------
# Feeds
# ---------------------------
@router.get("", response_model=FeedResponse, summary="Public feed, newest first")
async def get_public_feed(
    params: PageParams = Depends(pagination(10)),
    viewer: Optional[dict] = Depends(get_optional_user),
):
    return await public_feed(params, viewer)


@router.get("/following", response_model=FeedResponse, summary="Posts by users I follow")
async def get_following_feed(
    params: PageParams = Depends(pagination(10)),
    current_user: dict = Depends(get_current_user),
):
    return await following_feed(current_user, params)


# ---------------------------
# Comments by id (static prefix before /{post_id})
# ---------------------------
@router.delete("/comments/{comment_id}", response_model=MessageResponse, summary="Delete a comment")
async def delete_post_comment(comment_id: str, current_user: dict = Depends(get_current_user)):
    return await delete_comment(comment_id, current_user)


@router.post("/comments/{comment_id}/like", response_model=LikeResponse, summary="Like or unlike a comment")
async def like_comment(comment_id: str, current_user: dict = Depends(get_current_user)):
    return await toggle_comment_like(comment_id, current_user)


# ---------------------------
# Posts
# ---------------------------
@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
)
async def create_new_post(payload: PostCreateRequest, current_user: dict = Depends(get_current_user)):
    return PostResponse(post=await create_post(payload, current_user))


@router.get("/{post_id}", response_model=PostResponse, summary="Get a post by id")
async def get_single_post(post_id: str, viewer: Optional[dict] = Depends(get_optional_user)):
    return PostResponse(post=await get_post(post_id, viewer))


@router.put("/{post_id}", response_model=PostResponse, summary="Update my post")
async def update_my_post(
    post_id: str,
    payload: PostUpdateRequest,
    current_user: dict = Depends(get_current_user),
):
    return PostResponse(post=await update_post(post_id, payload, current_user))


@router.delete("/{post_id}", response_model=MessageResponse, summary="Delete my post")
async def delete_my_post(post_id: str, current_user: dict = Depends(get_current_user)):
    return await delete_post(post_id, current_user)


@router.post("/{post_id}/like", response_model=LikeResponse, summary="Like or unlike a post")
async def like_post(post_id: str, current_user: dict = Depends(get_current_user)):
    return await toggle_post_like(post_id, current_user)


@router.get("/{post_id}/comments", response_model=CommentsResponse, summary="Comments on a post")
async def get_post_comments(
    post_id: str,
    params: PageParams = Depends(pagination(20)),
    viewer: Optional[dict] = Depends(get_optional_user),
):
    return await list_comments(post_id, params, viewer)


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post",
)
async def comment_on_post(
    post_id: str,
    payload: CommentCreateRequest,
    current_user: dict = Depends(get_current_user),
):
    return CommentResponse(comment=await add_comment(post_id, payload, current_user))
