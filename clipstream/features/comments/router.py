"""Comment endpoints.

Endpoints:
    GET    /comments                  - All comments, or one video's with ?videoId=
    GET    /comments/{comment_id}     - Single comment
    POST   /comments                  - Create a comment
    PUT    /comments/{comment_id}     - Edit own comment
    DELETE /comments/{comment_id}     - Delete (author or video owner)
    POST   /comments/{comment_id}/like   - Like a comment
    DELETE /comments/{comment_id}/like   - Remove a like
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from clipstream.core.dependencies import CurrentUser, CursorParamsDep, OptionalUser, get_db_session
from clipstream.features.comments.schemas import (
    CommentCreate,
    CommentListResponse,
    CommentOut,
    CommentUpdate,
)
from clipstream.features.comments.service import CommentService
from clipstream.features.users.schemas import MessageResponse
from clipstream.features.videos.schemas import LikeResponse

router = APIRouter(prefix="/comments", tags=["comments"])


def get_comment_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> CommentService:
    return CommentService(session)


CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]


@router.get("", response_model=CommentListResponse, summary="List comments")
async def list_comments(
    service: CommentServiceDep,
    page: CursorParamsDep,
    user: OptionalUser,
    video_id: Annotated[int | None, Query(alias="videoId", gt=0)] = None,
) -> CommentListResponse:
    return await service.list_comments(page.cursor, page.limit, video_id=video_id, viewer=user)


@router.get(
    "/{comment_id}",
    response_model=CommentOut,
    summary="Get a comment",
    responses={404: {"description": "Comment not found"}},
)
async def get_comment(comment_id: int, service: CommentServiceDep, user: OptionalUser) -> CommentOut:
    return await service.get_comment(comment_id, user)


@router.post(
    "",
    response_model=CommentOut,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a video",
    responses={404: {"description": "Video not found"}},
)
async def create_comment(
    payload: CommentCreate, service: CommentServiceDep, user: CurrentUser
) -> CommentOut:
    return await service.create_comment(user, payload)


@router.put(
    "/{comment_id}",
    response_model=CommentOut,
    summary="Edit a comment",
    responses={403: {"description": "Not the author"}, 404: {"description": "Comment not found"}},
)
async def update_comment(
    comment_id: int,
    payload: CommentUpdate,
    service: CommentServiceDep,
    user: CurrentUser,
) -> CommentOut:
    return await service.update_comment(comment_id, user, payload)


@router.delete(
    "/{comment_id}",
    response_model=MessageResponse,
    summary="Delete a comment",
    responses={
        403: {"description": "Neither the author nor the video owner"},
        404: {"description": "Comment not found"},
    },
)
async def delete_comment(
    comment_id: int, service: CommentServiceDep, user: CurrentUser
) -> MessageResponse:
    await service.delete_comment(comment_id, user)
    return MessageResponse(message="Comment deleted successfully")


@router.post(
    "/{comment_id}/like",
    response_model=LikeResponse,
    summary="Like a comment",
    responses={404: {"description": "Comment not found"}},
)
async def like_comment(comment_id: int, service: CommentServiceDep, user: CurrentUser) -> LikeResponse:
    action, count = await service.set_like(comment_id, user, liked=True)
    return LikeResponse(message="Comment liked", action=action, like_count=count)


@router.delete(
    "/{comment_id}/like",
    response_model=LikeResponse,
    summary="Remove a comment like",
    responses={404: {"description": "Comment not found"}},
)
async def unlike_comment(
    comment_id: int, service: CommentServiceDep, user: CurrentUser
) -> LikeResponse:
    action, count = await service.set_like(comment_id, user, liked=False)
    return LikeResponse(message="Comment unliked", action=action, like_count=count)


__all__ = ["CommentServiceDep", "get_comment_service", "router"]
