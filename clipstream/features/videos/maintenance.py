"""Maintenance jobs over stored video files.

- cleanup: drop video rows whose local file no longer exists
- migrate: copy locally stored files to another backend (S3) and rewrite
  the rows to point at the copies

Both are driven by the ``clipstream storage`` CLI commands.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from clipstream.features.videos.repository import get_video_repository
from clipstream.infra.storage import StorageError, guess_mime_type, user_object_path

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from clipstream.core.settings import StorageSettings
    from clipstream.features.videos.models import Video
    from clipstream.infra.storage import BlobStore, LocalBackend, StoredObject

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CleanupReport:
    checked: int = 0
    missing: int = 0
    deleted: int = 0
    missing_ids: list[int] = field(default_factory=list)


@dataclass(slots=True)
class MigrationReport:
    migrated: int = 0
    skipped: int = 0
    failed: int = 0
    failed_ids: list[int] = field(default_factory=list)


def locate_local_file(
    local: LocalBackend, bucket: str, url: str | None, storage_path: str | None
) -> str | None:
    """Object path of a locally stored file, or None when it lives elsewhere.

    Rows written by the local backend carry ``storage_path``; older rows only
    have a URL of the form ``{base_url}/{bucket}/{path}``.
    """
    prefix = f"{local.base_url}/{bucket}/"
    if url is not None and url.startswith(prefix):
        return storage_path or url.removeprefix(prefix)
    if url is None and storage_path:
        return storage_path
    return None


async def cleanup_missing_videos(
    session: AsyncSession,
    local: LocalBackend,
    settings: StorageSettings,
    *,
    dry_run: bool = False,
) -> CleanupReport:
    """Delete video rows whose local video file is gone."""
    videos = get_video_repository()
    report = CleanupReport()

    for video in await videos.all_ordered(session):
        path = locate_local_file(
            local, settings.video_bucket, video.video_url, video.video_storage_path
        )
        if path is None:
            continue
        report.checked += 1
        if await local.exists(settings.video_bucket, path):
            continue

        report.missing += 1
        report.missing_ids.append(video.id)
        logger.info(
            "Video file missing",
            extra={"video_id": video.id, "path": path, "dry_run": dry_run},
        )
        if not dry_run:
            await videos.delete(session, video)
            report.deleted += 1

    if not dry_run:
        await session.commit()
    return report


async def _copy(
    local: LocalBackend,
    target: BlobStore,
    bucket: str,
    path: str,
    owner_id: int,
) -> StoredObject:
    data = await local.read(bucket, path)
    remote_path = path if path.startswith("user-") else user_object_path(owner_id, posixpath.basename(path))
    return await target.upload(bucket, remote_path, data, guess_mime_type(path))


async def _discard_copies(target: BlobStore, copies: list[StoredObject], video_id: int) -> None:
    """Remove objects already copied for a video whose migration failed."""
    for blob in copies:
        try:
            await target.delete(blob.bucket, blob.path)
        except StorageError as e:
            logger.warning(
                "Orphaned blob left in storage",
                extra={
                    "video_id": video_id,
                    "bucket": blob.bucket,
                    "path": blob.path,
                    "reason": "compensate-failed-migration",
                    "error": e.detail,
                },
            )


async def _migrate_one(
    video: Video,
    local: LocalBackend,
    target: BlobStore,
    settings: StorageSettings,
    dry_run: bool,
    copies: list[StoredObject],
) -> bool:
    """Copy one video's files; False when its video file is not on disk.

    Every object written to ``target`` is appended to ``copies`` as soon as
    it exists, so the caller can remove them if a later step fails.
    """
    video_path = locate_local_file(
        local, settings.video_bucket, video.video_url, video.video_storage_path
    )
    if video_path is None or not await local.exists(settings.video_bucket, video_path):
        return False

    thumbnail_path = locate_local_file(
        local, settings.thumbnail_bucket, video.thumbnail_url, video.thumbnail_storage_path
    )
    if thumbnail_path is not None and not await local.exists(
        settings.thumbnail_bucket, thumbnail_path
    ):
        logger.warning(
            "Thumbnail file missing, keeping old URL",
            extra={"video_id": video.id, "path": thumbnail_path},
        )
        thumbnail_path = None

    if dry_run:
        return True

    stored_video = await _copy(local, target, settings.video_bucket, video_path, video.user_id)
    copies.append(stored_video)
    video.video_url = stored_video.url
    video.video_storage_path = stored_video.path
    if thumbnail_path is not None:
        stored_thumbnail = await _copy(
            local, target, settings.thumbnail_bucket, thumbnail_path, video.user_id
        )
        copies.append(stored_thumbnail)
        video.thumbnail_url = stored_thumbnail.url
        video.thumbnail_storage_path = stored_thumbnail.path
    return True


async def migrate_local_videos(
    session: AsyncSession,
    local: LocalBackend,
    target: BlobStore,
    settings: StorageSettings,
    *,
    dry_run: bool = False,
) -> MigrationReport:
    """Move locally stored video files to ``target`` and repoint the rows.

    Each video is committed on its own so a failure part-way keeps the
    videos already migrated.
    """
    videos = get_video_repository()
    report = MigrationReport()

    for video in await videos.with_local_urls(session, f"{local.base_url}/"):
        video_id = video.id
        copies: list[StoredObject] = []
        try:
            migrated = await _migrate_one(video, local, target, settings, dry_run, copies)
        except StorageError as e:
            # Discard URLs already rewritten on this row and the objects already copied
            await session.refresh(video)
            await _discard_copies(target, copies, video_id)
            report.failed += 1
            report.failed_ids.append(video_id)
            logger.error(
                "Video migration failed",
                extra={"video_id": video_id, "error": e.detail},
            )
            continue

        if not migrated:
            report.skipped += 1
            logger.info("Video file not found locally, skipping", extra={"video_id": video_id})
            continue

        if not dry_run:
            await session.commit()
        report.migrated += 1
        logger.info(
            "Video migrated",
            extra={"video_id": video_id, "backend": target.backend_name, "dry_run": dry_run},
        )

    return report


__all__ = [
    "CleanupReport",
    "MigrationReport",
    "cleanup_missing_videos",
    "locate_local_file",
    "migrate_local_videos",
]
