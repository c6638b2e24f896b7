"""Unit tests for blob storage: naming, the local backend and StorageService."""

from __future__ import annotations

import logging
import re

import pytest
from botocore.exceptions import ClientError

from clipstream.core.settings import StorageSettings, clear_settings_cache
from clipstream.infra.storage import (
    LocalBackend,
    StorageDeleteError,
    StorageFileNotFoundError,
    StorageFileTooLargeError,
    StoragePermissionError,
    StorageService,
    StorageValidationError,
    generate_unique_file_name,
    get_storage_service,
    guess_mime_type,
    map_boto_error,
    reset_storage_service,
    user_object_path,
)
from clipstream.infra.storage.naming import file_extension, validate_object_path

# ──────────────────────────────────────────────────────────────
# Naming
# ──────────────────────────────────────────────────────────────


class TestNaming:
    def test_unique_name_keeps_extension(self):
        name = generate_unique_file_name("Holiday Clip.MP4")

        assert re.fullmatch(r"\d{13}-[0-9a-f]{16}\.mp4", name)

    def test_unique_names_differ(self):
        assert generate_unique_file_name("a.mp4") != generate_unique_file_name("a.mp4")

    def test_name_without_extension(self):
        assert re.fullmatch(r"\d{13}-[0-9a-f]{16}", generate_unique_file_name(None))

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [("clip.webm", ".webm"), ("archive.tar.gz", ".gz"), ("noext", ""), ("weird.$$$", ""), (None, "")],
    )
    def test_file_extension(self, filename, expected):
        assert file_extension(filename) == expected

    def test_user_object_path(self):
        assert user_object_path(42, "x.mp4") == "user-42/x.mp4"

    def test_guess_mime_type(self):
        assert guess_mime_type("user-1/x.mov") == "video/quicktime"
        assert guess_mime_type("user-1/x.bin") == "application/octet-stream"

    @pytest.mark.parametrize("path", ["", "/abs", "a/../b", "a//b", "a\\b", "./a"])
    def test_rejects_escaping_paths(self, path):
        with pytest.raises(ValueError, match="Invalid object path"):
            validate_object_path(path)


class TestBotoErrorMapping:
    @staticmethod
    def _client_error(code: str) -> ClientError:
        return ClientError({"Error": {"Code": code, "Message": "boom"}}, "PutObject")

    def test_not_found(self):
        error = map_boto_error(self._client_error("NoSuchKey"), operation="download", key="k")

        assert isinstance(error, StorageFileNotFoundError)
        assert error.status_code == 404
        assert error.extra["key"] == "k"

    def test_access_denied(self):
        error = map_boto_error(self._client_error("AccessDenied"), operation="upload")

        assert isinstance(error, StoragePermissionError)
        assert error.status_code == 503

    def test_delete_fallback(self):
        error = map_boto_error(self._client_error("SlowDown"), operation="delete")

        assert isinstance(error, StorageDeleteError)
        assert error.detail == "Delete failed: boom"


# ──────────────────────────────────────────────────────────────
# Local backend
# ──────────────────────────────────────────────────────────────


class TestLocalBackend:
    @pytest.fixture
    def backend(self, tmp_path) -> LocalBackend:
        return LocalBackend(tmp_path / "blobs", "/uploads/")

    @pytest.mark.asyncio
    async def test_upload_read_delete(self, backend, tmp_path):
        stored = await backend.upload("videos", "user-1/a.mp4", b"data", "video/mp4")

        assert stored.url == "/uploads/videos/user-1/a.mp4"
        assert stored.size_bytes == 4
        assert (tmp_path / "blobs" / "videos" / "user-1" / "a.mp4").read_bytes() == b"data"
        assert await backend.read("videos", "user-1/a.mp4") == b"data"
        assert await backend.exists("videos", "user-1/a.mp4") is True

        assert await backend.delete("videos", "user-1/a.mp4") is True
        assert await backend.exists("videos", "user-1/a.mp4") is False

    @pytest.mark.asyncio
    async def test_delete_missing_returns_false(self, backend):
        assert await backend.delete("videos", "user-1/missing.mp4") is False

    @pytest.mark.asyncio
    async def test_read_missing_raises(self, backend):
        with pytest.raises(StorageFileNotFoundError):
            await backend.read("videos", "user-1/missing.mp4")

    @pytest.mark.asyncio
    async def test_traversal_rejected(self, backend):
        with pytest.raises(StorageValidationError):
            await backend.upload("videos", "../escape.mp4", b"x", "video/mp4")

    def test_from_settings_prefers_public_base_url(self, tmp_path):
        settings = StorageSettings(
            backend="local",
            local_root=str(tmp_path),
            public_base_url="https://cdn.example.com",
        )

        backend = LocalBackend.from_settings(settings)

        assert backend.public_url("avatars", "user-1/a.png") == "https://cdn.example.com/avatars/user-1/a.png"


# ──────────────────────────────────────────────────────────────
# StorageService
# ──────────────────────────────────────────────────────────────


class FailingDeleteBackend(LocalBackend):
    """Local backend whose deletes always fail."""

    async def delete(self, bucket: str, path: str) -> bool:
        raise StorageDeleteError(f"Failed to delete {bucket}/{path}")


class TestStorageService:
    @pytest.fixture
    def settings(self, tmp_path) -> StorageSettings:
        return StorageSettings(backend="local", local_root=str(tmp_path), max_file_size_mb=1)

    @pytest.fixture
    def service(self, settings, tmp_path) -> StorageService:
        return StorageService(settings=settings, backend=LocalBackend(tmp_path, "/uploads"))

    @pytest.mark.asyncio
    async def test_store_video_uses_video_bucket_and_owner_prefix(self, service):
        stored = await service.store_video(7, "clip.mp4", "video/mp4", b"bytes")

        assert stored.bucket == "videos"
        assert stored.path.startswith("user-7/")
        assert stored.path.endswith(".mp4")
        assert stored.url == f"/uploads/videos/{stored.path}"

    def test_rejects_non_video_content_type(self, service):
        with pytest.raises(StorageValidationError) as exc_info:
            service.validate_video("text/plain", b"x")

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Invalid video file type"

    def test_rejects_missing_content_type(self, service):
        with pytest.raises(StorageValidationError):
            service.validate_image(None, b"x", field="avatar")

    def test_rejects_empty_file(self, service):
        with pytest.raises(StorageValidationError, match="video is empty"):
            service.validate_video("video/mp4", b"")

    def test_rejects_oversized_file(self, service):
        with pytest.raises(StorageFileTooLargeError) as exc_info:
            service.validate_video("video/mp4", b"x" * (1024 * 1024 + 1))

        assert exc_info.value.status_code == 413

    @pytest.mark.asyncio
    async def test_store_avatar_rejects_video(self, service):
        with pytest.raises(StorageValidationError, match="Invalid avatar file type"):
            await service.store_avatar(1, "a.mp4", "video/mp4", b"x")

    @pytest.mark.asyncio
    async def test_discard_without_path_is_noop(self, service):
        assert await service.discard("videos", None) is False

    @pytest.mark.asyncio
    async def test_discard_logs_orphan_on_failure(self, settings, tmp_path, caplog):
        service = StorageService(settings=settings, backend=FailingDeleteBackend(tmp_path, "/uploads"))

        with caplog.at_level(logging.WARNING, logger="clipstream.infra.storage.service"):
            removed = await service.discard("videos", "user-1/a.mp4", reason="video-deleted")

        assert removed is False
        record = next(r for r in caplog.records if r.getMessage() == "Orphaned blob left in storage")
        assert record.bucket == "videos"
        assert record.path == "user-1/a.mp4"
        assert record.reason == "video-deleted"

    @pytest.mark.asyncio
    async def test_startup_and_shutdown_are_idempotent(self, service, tmp_path):
        await service.startup()
        await service.startup()
        await service.shutdown()
        await service.shutdown()

        assert tmp_path.is_dir()


class TestStorageSettings:
    def test_content_type_prefixes(self):
        settings = StorageSettings(backend="local")

        assert settings.is_video_type("video/mp4")
        assert not settings.is_video_type("image/png")
        assert settings.is_image_type("image/png")
        assert not settings.is_image_type(None)

    def test_bucket_prefix(self):
        settings = StorageSettings(backend="local", bucket_prefix="clips-")

        assert settings.s3_bucket_name("videos") == "clips-videos"

    def test_max_file_size_bytes(self):
        assert StorageSettings(backend="local", max_file_size_mb=2).max_file_size_bytes == 2 * 1024 * 1024


class TestSharedStorageService:
    @pytest.fixture(autouse=True)
    def fresh_instance(self):
        clear_settings_cache()
        reset_storage_service()
        yield
        clear_settings_cache()
        reset_storage_service()

    def test_instance_is_shared(self):
        assert get_storage_service() is get_storage_service()

    def test_reset_picks_up_new_settings(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STORAGE_LOCAL_ROOT", str(tmp_path / "first"))
        first = get_storage_service()

        monkeypatch.setenv("STORAGE_LOCAL_ROOT", str(tmp_path / "second"))
        clear_settings_cache()
        reset_storage_service()
        second = get_storage_service()

        assert second is not first
        assert first.settings.local_root == str(tmp_path / "first")
        assert second.settings.local_root == str(tmp_path / "second")
