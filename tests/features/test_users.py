"""API tests for accounts: registration, login, profiles, edits and deletion."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from clipstream.features.follows.models import Follow
from clipstream.features.videos.models import Video
from clipstream.infra.auth import decode_access_token

AVATAR = {"avatar": ("me.png", b"png-bytes", "image/png")}


def stored_files(root) -> list:
    return sorted(p for p in root.rglob("*") if p.is_file()) if root.exists() else []


# ──────────────────────────────────────────────────────────────
# Registration and login
# ──────────────────────────────────────────────────────────────


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_returns_profile_and_token(self, client):
        response = await client.post(
            "/api/users/register",
            json={
                "username": "alice",
                "email": "Alice@Example.com",
                "password": "secret123",
                "name": "Alice",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["user"]["username"] == "alice"
        assert body["user"]["email"] == "alice@example.com"
        assert body["user"]["followerCount"] == 0
        assert body["user"]["videoCount"] == 0
        assert "isFollowing" not in body["user"]
        assert "password" not in body["user"]
        assert "passwordHash" not in body["user"]
        assert decode_access_token(body["token"]) == body["user"]["id"]

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client, make_user):
        await make_user("taken", email="taken@example.com")

        response = await client.post(
            "/api/users/register",
            json={"username": "fresh", "email": "TAKEN@example.com", "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Email already in use"

    @pytest.mark.asyncio
    async def test_duplicate_username(self, client, make_user):
        await make_user("taken")

        response = await client.post(
            "/api/users/register",
            json={"username": "taken", "email": "new@example.com", "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json()["type"] == "username-taken"

    @pytest.mark.asyncio
    async def test_short_password(self, client):
        response = await client.post(
            "/api/users/register",
            json={"username": "bob", "email": "bob@example.com", "password": "123"},
        )

        assert response.status_code == 400
        assert response.json()["type"] == "weak-password"

    @pytest.mark.asyncio
    async def test_invalid_email(self, client):
        response = await client.post(
            "/api/users/register",
            json={"username": "bob", "email": "not-an-email", "password": "secret123"},
        )

        assert response.status_code == 422


class TestLogin:
    @pytest.mark.asyncio
    async def test_login(self, client, make_user):
        user = await make_user("carol")

        response = await client.post(
            "/api/users/login", json={"email": "Carol@example.com", "password": "secret123"}
        )

        assert response.status_code == 200
        assert response.json()["user"]["id"] == user.id
        assert decode_access_token(response.json()["token"]) == user.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("email", "password"),
        [("carol@example.com", "wrong-password"), ("nobody@example.com", "secret123")],
    )
    async def test_bad_credentials(self, client, make_user, email, password):
        await make_user("carol")

        response = await client.post("/api/users/login", json={"email": email, "password": password})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"


# ──────────────────────────────────────────────────────────────
# Profiles
# ──────────────────────────────────────────────────────────────


class TestProfiles:
    @pytest.mark.asyncio
    async def test_list_users(self, client, make_user):
        await make_user("a")
        await make_user("b")

        body = (await client.get("/api/users")).json()

        assert {u["username"] for u in body} == {"a", "b"}
        assert all("email" not in u for u in body)

    @pytest.mark.asyncio
    async def test_list_users_carries_counts(self, client, db_session, make_user, make_video):
        star = await make_user("star", bio="dances")
        fan = await make_user("fan")
        await make_video(star)
        await make_video(star)
        db_session.add(Follow(follower_id=fan.id, following_id=star.id))
        await db_session.commit()

        body = (await client.get("/api/users")).json()

        by_name = {u["username"]: u for u in body}
        assert by_name["star"]["bio"] == "dances"
        assert "createdAt" in by_name["star"]
        assert (
            by_name["star"]["videoCount"],
            by_name["star"]["followerCount"],
            by_name["star"]["followingCount"],
        ) == (2, 1, 0)
        assert (by_name["fan"]["followerCount"], by_name["fan"]["followingCount"]) == (0, 1)

    @pytest.mark.asyncio
    async def test_profile_counts(self, client, db_session, make_user, make_video):
        star = await make_user()
        fans = [await make_user() for _ in range(2)]
        await make_video(star)
        for fan in fans:
            db_session.add(Follow(follower_id=fan.id, following_id=star.id))
        db_session.add(Follow(follower_id=star.id, following_id=fans[0].id))
        await db_session.commit()

        body = (await client.get(f"/api/users/{star.id}")).json()

        assert body["followerCount"] == 2
        assert body["followingCount"] == 1
        assert body["videoCount"] == 1
        assert "isFollowing" not in body

    @pytest.mark.asyncio
    async def test_is_following_for_authenticated_viewer(
        self, client, db_session, make_user, auth_headers
    ):
        star = await make_user()
        fan = await make_user()
        stranger = await make_user()
        db_session.add(Follow(follower_id=fan.id, following_id=star.id))
        await db_session.commit()

        as_fan = (await client.get(f"/api/users/{star.id}", headers=auth_headers(fan))).json()
        as_stranger = (
            await client.get(f"/api/users/{star.id}", headers=auth_headers(stranger))
        ).json()

        assert as_fan["isFollowing"] is True
        assert as_stranger["isFollowing"] is False

    @pytest.mark.asyncio
    async def test_unknown_user(self, client):
        response = await client.get("/api/users/999")

        assert response.status_code == 404
        assert response.json()["type"] == "user-not-found"


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_edit_name_and_bio(self, client, make_user, auth_headers):
        user = await make_user()

        response = await client.put(
            f"/api/users/{user.id}",
            headers=auth_headers(user),
            data={"name": "New Name", "bio": "I post clips"},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "New Name"
        assert response.json()["bio"] == "I post clips"

    @pytest.mark.asyncio
    async def test_avatar_upload_replaces_previous(self, client, make_user, auth_headers, uploads_root):
        user = await make_user()

        first = await client.put(f"/api/users/{user.id}", headers=auth_headers(user), files=AVATAR)
        second = await client.put(f"/api/users/{user.id}", headers=auth_headers(user), files=AVATAR)

        assert first.status_code == second.status_code == 200
        first_url = first.json()["avatar"]
        second_url = second.json()["avatar"]
        assert first_url.startswith(f"/uploads/avatars/user-{user.id}/")
        assert first_url != second_url
        assert stored_files(uploads_root) == [uploads_root / second_url.removeprefix("/uploads/")]

    @pytest.mark.asyncio
    async def test_avatar_must_be_an_image(self, client, make_user, auth_headers, uploads_root):
        user = await make_user()

        response = await client.put(
            f"/api/users/{user.id}",
            headers=auth_headers(user),
            files={"avatar": ("me.mp4", b"video", "video/mp4")},
        )

        assert response.status_code == 400
        assert stored_files(uploads_root) == []

    @pytest.mark.asyncio
    async def test_cannot_edit_someone_else(self, client, make_user, auth_headers):
        target = await make_user()

        response = await client.put(
            f"/api/users/{target.id}", headers=auth_headers(await make_user()), data={"name": "x"}
        )

        assert response.status_code == 403
        assert response.json()["type"] == "not-account-owner"


class TestDeleteAccount:
    @pytest.mark.asyncio
    async def test_delete_cascades_and_removes_blobs(
        self,
        client,
        session_factory,
        db_session,
        make_user,
        make_video,
        auth_headers,
        upload_files,
        uploads_root,
    ):
        user = await make_user()
        other = await make_user()
        headers = auth_headers(user)
        await client.put(f"/api/users/{user.id}", headers=headers, files=AVATAR)
        await client.post("/api/videos", headers=headers, files=upload_files(thumbnail=b"png"))
        others_video = await make_video(other)
        db_session.add(Follow(follower_id=other.id, following_id=user.id))
        await db_session.commit()
        await client.post(f"/api/videos/{others_video.id}/like", headers=headers)

        response = await client.delete(f"/api/users/{user.id}", headers=headers)

        assert response.status_code == 200
        assert response.json() == {"message": "User deleted successfully"}
        assert stored_files(uploads_root) == []
        assert (await client.get(f"/api/users/{user.id}")).status_code == 404
        assert (await client.get(f"/api/videos/{others_video.id}")).json()["likeCount"] == 0
        async with session_factory() as session:
            assert await session.scalar(select(func.count(Video.id)).where(Video.user_id == user.id)) == 0
            assert await session.scalar(select(func.count(Follow.id))) == 0

    @pytest.mark.asyncio
    async def test_token_of_deleted_user_is_rejected(self, client, make_user, auth_headers):
        user = await make_user()
        headers = auth_headers(user)
        await client.delete(f"/api/users/{user.id}", headers=headers)

        response = await client.get("/api/videos/following", headers=headers)

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_cannot_delete_someone_else(self, client, make_user, auth_headers):
        target = await make_user()

        response = await client.delete(
            f"/api/users/{target.id}", headers=auth_headers(await make_user())
        )

        assert response.status_code == 403
