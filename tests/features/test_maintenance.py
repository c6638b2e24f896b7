"""Maintenance jobs: cleanup of missing files and migration to another backend."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from clipstream.core.settings import StorageSettings
from clipstream.features.videos.maintenance import (
    cleanup_missing_videos,
    locate_local_file,
    migrate_local_videos,
)
from clipstream.features.videos.models import Video
from clipstream.infra.storage import LocalBackend, StorageUploadError


@pytest.fixture
def settings(uploads_root) -> StorageSettings:
    return StorageSettings(backend="local", local_root=str(uploads_root))


@pytest.fixture
def local(uploads_root) -> LocalBackend:
    return LocalBackend(uploads_root, "/uploads")


@pytest.fixture
def remote(tmp_path) -> LocalBackend:
    """Stand-in for the S3 target: another blob store with its own URLs."""
    return LocalBackend(tmp_path / "remote", "https://cdn.example.com")


@pytest.fixture
def stored_video(make_user, make_video, local):
    """Video row whose file (and thumbnail) exist in the local store."""

    async def _make(*, with_file: bool = True, with_thumbnail: bool = False) -> Video:
        owner = await make_user()
        path = f"user-{owner.id}/clip.mp4"
        fields = {"video_url": f"/uploads/videos/{path}", "video_storage_path": path}
        if with_file:
            await local.upload("videos", path, b"video-bytes", "video/mp4")
        if with_thumbnail:
            thumb = f"user-{owner.id}/thumb.png"
            await local.upload("thumbnails", thumb, b"png", "image/png")
            fields |= {"thumbnail_url": f"/uploads/thumbnails/{thumb}", "thumbnail_storage_path": thumb}
        return await make_video(owner, **fields)

    return _make


class TestLocateLocalFile:
    def test_prefers_storage_path(self, local):
        assert locate_local_file(local, "videos", "/uploads/videos/a/b.mp4", "user-1/b.mp4") == "user-1/b.mp4"

    def test_derives_path_from_url(self, local):
        assert locate_local_file(local, "videos", "/uploads/videos/legacy.mp4", None) == "legacy.mp4"

    def test_remote_url_is_not_local(self, local):
        assert locate_local_file(local, "videos", "https://cdn.example.com/videos/x.mp4", "x.mp4") is None


class TestCleanup:
    @pytest.mark.asyncio
    async def test_deletes_rows_with_missing_files(self, session_factory, local, settings, stored_video):
        present = await stored_video()
        missing = await stored_video(with_file=False)

        async with session_factory() as session:
            report = await cleanup_missing_videos(session, local, settings)

        assert report.checked == 2
        assert report.missing_ids == [missing.id]
        assert report.deleted == 1
        async with session_factory() as session:
            remaining = (await session.execute(select(Video.id))).scalars().all()
        assert remaining == [present.id]

    @pytest.mark.asyncio
    async def test_dry_run_keeps_rows(self, session_factory, local, settings, stored_video):
        missing = await stored_video(with_file=False)

        async with session_factory() as session:
            report = await cleanup_missing_videos(session, local, settings, dry_run=True)

        assert report.missing_ids == [missing.id]
        assert report.deleted == 0
        async with session_factory() as session:
            assert await session.get(Video, missing.id) is not None


class TestMigrate:
    @pytest.mark.asyncio
    async def test_copies_files_and_rewrites_urls(
        self, session_factory, local, remote, settings, stored_video
    ):
        video = await stored_video(with_thumbnail=True)

        async with session_factory() as session:
            report = await migrate_local_videos(session, local, remote, settings)

        assert report.migrated == 1
        assert report.failed == 0
        async with session_factory() as session:
            row = await session.get(Video, video.id)
        assert row.video_url == f"https://cdn.example.com/videos/user-{video.user_id}/clip.mp4"
        assert row.thumbnail_url.startswith("https://cdn.example.com/thumbnails/")
        assert await remote.read("videos", row.video_storage_path) == b"video-bytes"

    @pytest.mark.asyncio
    async def test_skips_missing_files(self, session_factory, local, remote, settings, stored_video):
        await stored_video(with_file=False)

        async with session_factory() as session:
            report = await migrate_local_videos(session, local, remote, settings)

        assert report.skipped == 1
        assert report.migrated == 0

    @pytest.mark.asyncio
    async def test_dry_run_changes_nothing(self, session_factory, local, remote, settings, stored_video):
        video = await stored_video()

        async with session_factory() as session:
            report = await migrate_local_videos(session, local, remote, settings, dry_run=True)

        assert report.migrated == 1
        assert not await remote.exists("videos", video.video_storage_path)
        async with session_factory() as session:
            assert (await session.get(Video, video.id)).video_url.startswith("/uploads/")

    @pytest.mark.asyncio
    async def test_failure_is_reported_and_row_kept(
        self, session_factory, local, remote, settings, stored_video, monkeypatch
    ):
        video = await stored_video()

        async def failing_upload(bucket, path, data, content_type):
            raise StorageUploadError(f"Failed to store {bucket}/{path}")

        monkeypatch.setattr(remote, "upload", failing_upload)

        async with session_factory() as session:
            report = await migrate_local_videos(session, local, remote, settings)

        assert report.failed_ids == [video.id]
        async with session_factory() as session:
            assert (await session.get(Video, video.id)).video_url.startswith("/uploads/")

    @pytest.mark.asyncio
    async def test_thumbnail_failure_removes_copied_video(
        self, session_factory, local, remote, settings, stored_video, monkeypatch
    ):
        video = await stored_video(with_thumbnail=True)
        upload = remote.upload

        async def thumbnails_fail(bucket, path, data, content_type):
            if bucket == "thumbnails":
                raise StorageUploadError(f"Failed to store {bucket}/{path}")
            return await upload(bucket, path, data, content_type)

        monkeypatch.setattr(remote, "upload", thumbnails_fail)

        async with session_factory() as session:
            report = await migrate_local_videos(session, local, remote, settings)

        assert report.failed_ids == [video.id]
        assert not await remote.exists("videos", video.video_storage_path)
        async with session_factory() as session:
            row = await session.get(Video, video.id)
        assert row.video_url == video.video_url
        assert row.thumbnail_url.startswith("/uploads/")
