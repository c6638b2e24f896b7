"""Video endpoints.

Endpoints:
    GET    /videos                        - Global feed (cursor paginated)
    GET    /videos/following              - Feed of followed accounts
    GET    /videos/{video_id}             - Video detail, counts one view
    GET    /videos/{video_id}/comments    - Video comments (cursor paginated)
    GET    /videos/{video_id}/comments/page - Video comments (page numbers)
    POST   /videos                        - Upload a video (multipart)
    PUT    /videos/{video_id}             - Edit caption / audio name
    DELETE /videos/{video_id}             - Delete a video and its files
    POST   /videos/{video_id}/like        - Like a video
    DELETE /videos/{video_id}/like        - Remove a like
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from clipstream.core.dependencies import (
    CurrentUser,
    CursorParamsDep,
    OptionalUser,
    get_db_session,
    get_storage,
)
from clipstream.core.exceptions import BadRequestException
from clipstream.features.comments.router import CommentServiceDep
from clipstream.features.comments.schemas import CommentListResponse, CommentPageResponse
from clipstream.features.users.schemas import MessageResponse
from clipstream.features.videos.schemas import (
    LikeResponse,
    VideoListResponse,
    VideoOut,
    VideoUpdate,
)
from clipstream.features.videos.service import VideoService
from clipstream.infra.storage import IncomingFile, StorageService

router = APIRouter(prefix="/videos", tags=["videos"])


def get_video_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    storage: Annotated[StorageService, Depends(get_storage)],
) -> VideoService:
    return VideoService(session, storage)


VideoServiceDep = Annotated[VideoService, Depends(get_video_service)]


async def read_upload(upload: UploadFile) -> IncomingFile:
    """Read a multipart upload fully into memory."""
    data = await upload.read()
    return IncomingFile(filename=upload.filename, content_type=upload.content_type, data=data)


# ──────────────────────────────────────────────────────────────
# Listings
# ──────────────────────────────────────────────────────────────


@router.get("", response_model=VideoListResponse, summary="List videos")
async def list_videos(
    service: VideoServiceDep,
    page: CursorParamsDep,
    user: OptionalUser,
) -> VideoListResponse:
    """Newest videos first. ``isLiked`` is included for authenticated callers."""
    return await service.list_videos(page.cursor, page.limit, user)


@router.get(
    "/following",
    response_model=VideoListResponse,
    summary="Following feed",
    responses={401: {"description": "Authentication required"}},
)
async def following_feed(
    service: VideoServiceDep,
    page: CursorParamsDep,
    user: CurrentUser,
) -> VideoListResponse:
    """Videos posted by accounts the caller follows, newest first."""
    return await service.following_feed(user, page.cursor, page.limit)


@router.get(
    "/{video_id}",
    response_model=VideoOut,
    summary="Get a video",
    responses={404: {"description": "Video not found"}},
)
async def get_video(video_id: int, service: VideoServiceDep, user: OptionalUser) -> VideoOut:
    """Return one video. Each request counts as a view."""
    return await service.get_video(video_id, user)


@router.get(
    "/{video_id}/comments",
    response_model=CommentListResponse,
    summary="List a video's comments",
    responses={404: {"description": "Video not found"}},
)
async def list_video_comments(
    video_id: int,
    service: CommentServiceDep,
    page: CursorParamsDep,
    user: OptionalUser,
) -> CommentListResponse:
    return await service.list_video_comments(video_id, page.cursor, page.limit, user)


@router.get(
    "/{video_id}/comments/page",
    response_model=CommentPageResponse,
    summary="List a video's comments by page number",
    responses={404: {"description": "Video not found"}},
)
async def video_comments_page(
    video_id: int,
    service: CommentServiceDep,
    user: OptionalUser,
    page: Annotated[str | None, Query(description="1-based page number")] = None,
    limit: Annotated[str | None, Query(description="Page size")] = None,
) -> CommentPageResponse:
    return await service.video_comments_page(video_id, page, limit, user)


# ──────────────────────────────────────────────────────────────
# Upload, edit, delete
# ──────────────────────────────────────────────────────────────


@router.post(
    "",
    response_model=VideoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a video",
    responses={
        400: {"description": "Missing or invalid file"},
        413: {"description": "File too large"},
        503: {"description": "Storage unavailable"},
    },
)
async def create_video(
    service: VideoServiceDep,
    user: CurrentUser,
    video: Annotated[UploadFile | None, File(description="Video file")] = None,
    thumbnail: Annotated[UploadFile | None, File(description="Optional thumbnail image")] = None,
    caption: Annotated[str | None, Form()] = None,
    audio_name: Annotated[str | None, Form(alias="audioName")] = None,
) -> VideoOut:
    """Upload a video with an optional thumbnail.

    The files are stored first and the video row written afterwards; if the
    row cannot be written the stored files are removed again.
    """
    if video is None:
        raise BadRequestException("Video file is required", type="missing-video-file")

    video_file = await read_upload(video)
    thumbnail_file = await read_upload(thumbnail) if thumbnail is not None else None
    return await service.create_video(
        user,
        video_file,
        thumbnail_file,
        caption=caption,
        audio_name=audio_name,
    )


@router.put(
    "/{video_id}",
    response_model=VideoOut,
    summary="Edit a video",
    responses={403: {"description": "Not the owner"}, 404: {"description": "Video not found"}},
)
async def update_video(
    video_id: int,
    payload: VideoUpdate,
    service: VideoServiceDep,
    user: CurrentUser,
) -> VideoOut:
    return await service.update_video(video_id, user, payload)


@router.delete(
    "/{video_id}",
    response_model=MessageResponse,
    summary="Delete a video",
    responses={403: {"description": "Not the owner"}, 404: {"description": "Video not found"}},
)
async def delete_video(video_id: int, service: VideoServiceDep, user: CurrentUser) -> MessageResponse:
    await service.delete_video(video_id, user)
    return MessageResponse(message="Video deleted successfully")


# ──────────────────────────────────────────────────────────────
# Likes
# ──────────────────────────────────────────────────────────────


@router.post(
    "/{video_id}/like",
    response_model=LikeResponse,
    summary="Like a video",
    responses={404: {"description": "Video not found"}},
)
async def like_video(video_id: int, service: VideoServiceDep, user: CurrentUser) -> LikeResponse:
    action, count = await service.set_like(video_id, user, liked=True)
    return LikeResponse(message="Video liked", action=action, like_count=count)


@router.delete(
    "/{video_id}/like",
    response_model=LikeResponse,
    summary="Remove a like",
    responses={404: {"description": "Video not found"}},
)
async def unlike_video(video_id: int, service: VideoServiceDep, user: CurrentUser) -> LikeResponse:
    action, count = await service.set_like(video_id, user, liked=False)
    return LikeResponse(message="Video unliked", action=action, like_count=count)


__all__ = ["get_video_service", "router"]
