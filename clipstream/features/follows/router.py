"""Follow graph endpoints.

Endpoints:
    GET    /users/{user_id}/followers - Users following {user_id}
    GET    /users/{user_id}/following - Users {user_id} follows
    POST   /users/{user_id}/follow    - Follow {user_id}
    DELETE /users/{user_id}/follow    - Unfollow {user_id}
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clipstream.core.dependencies import CurrentUser, get_db_session
from clipstream.features.follows.service import FollowService
from clipstream.features.users.schemas import FollowResponse, UserSummary

router = APIRouter(prefix="/users", tags=["follows"])


def get_follow_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> FollowService:
    return FollowService(session)


FollowServiceDep = Annotated[FollowService, Depends(get_follow_service)]


@router.get(
    "/{user_id}/followers",
    response_model=list[UserSummary],
    summary="List followers",
    responses={404: {"description": "User not found"}},
)
async def list_followers(user_id: int, service: FollowServiceDep) -> list[UserSummary]:
    users = await service.followers(user_id)
    return [UserSummary.model_validate(user) for user in users]


@router.get(
    "/{user_id}/following",
    response_model=list[UserSummary],
    summary="List followed users",
    responses={404: {"description": "User not found"}},
)
async def list_following(user_id: int, service: FollowServiceDep) -> list[UserSummary]:
    users = await service.following(user_id)
    return [UserSummary.model_validate(user) for user in users]


@router.post(
    "/{user_id}/follow",
    response_model=FollowResponse,
    summary="Follow a user",
    responses={400: {"description": "Self-follow or already following"}, 404: {"description": "User not found"}},
)
async def follow_user(user_id: int, user: CurrentUser, service: FollowServiceDep) -> FollowResponse:
    count = await service.follow(user, user_id)
    return FollowResponse(message="User followed successfully", followed=True, follower_count=count)


@router.delete(
    "/{user_id}/follow",
    response_model=FollowResponse,
    summary="Unfollow a user",
    responses={400: {"description": "Not following"}, 404: {"description": "User not found"}},
)
async def unfollow_user(user_id: int, user: CurrentUser, service: FollowServiceDep) -> FollowResponse:
    count = await service.unfollow(user, user_id)
    return FollowResponse(message="User unfollowed successfully", followed=False, follower_count=count)
