"""User account endpoints.

Endpoints:
    POST   /users/register      - Create an account, returns a token
    POST   /users/login         - Exchange credentials for a token
    GET    /users               - List users
    GET    /users/{user_id}     - Profile with counts
    PUT    /users/{user_id}     - Edit own profile (multipart, optional avatar)
    DELETE /users/{user_id}     - Delete own account
    GET    /users/{user_id}/videos - A user's videos (cursor paginated)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from clipstream.core.dependencies import (
    CurrentUser,
    CursorParamsDep,
    OptionalUser,
    get_db_session,
    get_storage,
)
from clipstream.features.users.schemas import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserListEntry,
    UserProfile,
)
from clipstream.features.users.service import UserService
from clipstream.features.videos.router import VideoServiceDep, read_upload
from clipstream.features.videos.schemas import VideoListResponse
from clipstream.infra.storage import StorageService

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    storage: Annotated[StorageService, Depends(get_storage)],
) -> UserService:
    return UserService(session, storage)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    responses={400: {"description": "Email or username already in use"}},
)
async def register(payload: RegisterRequest, service: UserServiceDep) -> AuthResponse:
    user, token = await service.register(payload)
    return AuthResponse(user=await service.profile(user), token=token)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in",
    responses={401: {"description": "Invalid credentials"}},
)
async def login(payload: LoginRequest, service: UserServiceDep) -> AuthResponse:
    user, token = await service.login(payload)
    return AuthResponse(user=await service.profile(user), token=token)


@router.get("", response_model=list[UserListEntry], summary="List users")
async def list_users(service: UserServiceDep) -> list[UserListEntry]:
    return await service.list_users()


@router.get(
    "/{user_id}",
    response_model=UserProfile,
    summary="Get a profile",
    responses={404: {"description": "User not found"}},
)
async def get_user(user_id: int, service: UserServiceDep, viewer: OptionalUser) -> UserProfile:
    return await service.get_profile(user_id, viewer)


@router.put(
    "/{user_id}",
    response_model=UserProfile,
    summary="Edit own profile",
    responses={
        400: {"description": "Invalid avatar"},
        403: {"description": "Not your account"},
        404: {"description": "User not found"},
    },
)
async def update_user(
    user_id: int,
    service: UserServiceDep,
    user: CurrentUser,
    name: Annotated[str | None, Form(max_length=100)] = None,
    bio: Annotated[str | None, Form(max_length=500)] = None,
    avatar: Annotated[UploadFile | None, File(description="Avatar image")] = None,
) -> UserProfile:
    avatar_file = await read_upload(avatar) if avatar is not None else None
    return await service.update_profile(user_id, user, name=name, bio=bio, avatar=avatar_file)


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete own account",
    responses={403: {"description": "Not your account"}, 404: {"description": "User not found"}},
)
async def delete_user(user_id: int, service: UserServiceDep, user: CurrentUser) -> MessageResponse:
    await service.delete_account(user_id, user)
    return MessageResponse(message="User deleted successfully")


@router.get(
    "/{user_id}/videos",
    response_model=VideoListResponse,
    summary="List a user's videos",
    responses={404: {"description": "User not found"}},
)
async def list_user_videos(
    user_id: int,
    videos: VideoServiceDep,
    page: CursorParamsDep,
    viewer: OptionalUser,
) -> VideoListResponse:
    return await videos.list_user_videos(user_id, page.cursor, page.limit, viewer)


__all__ = ["get_user_service", "router"]
