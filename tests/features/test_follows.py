"""API tests for the follow graph."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from clipstream.features.follows.models import Follow
from clipstream.features.follows.service import FollowService


class TestFollowService:
    """The service owns the transaction: changes are committed when it returns."""

    @pytest.mark.asyncio
    async def test_follow_and_unfollow_commit(self, db_session, session_factory, make_user):
        star = await make_user()
        fan = await make_user()
        service = FollowService(db_session)

        assert await service.follow(fan, star.id) == 1
        async with session_factory() as other:
            pairs = (await other.execute(select(Follow.follower_id, Follow.following_id))).all()
        assert [tuple(pair) for pair in pairs] == [(fan.id, star.id)]

        assert await service.unfollow(fan, star.id) == 0
        async with session_factory() as other:
            assert (await other.execute(select(Follow.id))).first() is None


class TestFollow:
    @pytest.mark.asyncio
    async def test_follow_then_unfollow(self, client, make_user, auth_headers):
        star = await make_user()
        fan = await make_user()
        headers = auth_headers(fan)

        followed = await client.post(f"/api/users/{star.id}/follow", headers=headers)
        unfollowed = await client.delete(f"/api/users/{star.id}/follow", headers=headers)

        assert followed.status_code == 200
        assert followed.json() == {
            "message": "User followed successfully",
            "followed": True,
            "followerCount": 1,
        }
        assert unfollowed.json() == {
            "message": "User unfollowed successfully",
            "followed": False,
            "followerCount": 0,
        }

    @pytest.mark.asyncio
    async def test_cannot_follow_self(self, client, make_user, auth_headers):
        user = await make_user()

        response = await client.post(f"/api/users/{user.id}/follow", headers=auth_headers(user))

        assert response.status_code == 400
        assert response.json()["type"] == "self-follow"

    @pytest.mark.asyncio
    async def test_duplicate_follow(self, client, make_user, auth_headers):
        star = await make_user()
        headers = auth_headers(await make_user())
        await client.post(f"/api/users/{star.id}/follow", headers=headers)

        response = await client.post(f"/api/users/{star.id}/follow", headers=headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Already following this user"

    @pytest.mark.asyncio
    async def test_unfollow_when_not_following(self, client, make_user, auth_headers):
        star = await make_user()

        response = await client.delete(
            f"/api/users/{star.id}/follow", headers=auth_headers(await make_user())
        )

        assert response.status_code == 400
        assert response.json()["type"] == "not-following"

    @pytest.mark.asyncio
    async def test_unknown_target(self, client, make_user, auth_headers):
        response = await client.post("/api/users/999/follow", headers=auth_headers(await make_user()))

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client, make_user):
        star = await make_user()

        response = await client.post(f"/api/users/{star.id}/follow")

        assert response.status_code == 401


class TestFollowLists:
    @pytest.mark.asyncio
    async def test_followers_and_following(self, client, make_user, auth_headers):
        star = await make_user("star")
        fan = await make_user("fan")
        await client.post(f"/api/users/{star.id}/follow", headers=auth_headers(fan))

        followers = (await client.get(f"/api/users/{star.id}/followers")).json()
        following = (await client.get(f"/api/users/{fan.id}/following")).json()

        assert [u["username"] for u in followers] == ["fan"]
        assert [u["username"] for u in following] == ["star"]

    @pytest.mark.asyncio
    async def test_unknown_user(self, client):
        assert (await client.get("/api/users/999/followers")).status_code == 404
