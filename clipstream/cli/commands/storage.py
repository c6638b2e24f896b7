"""Blob storage commands.

Example:
    clipstream storage info
    clipstream storage cleanup --dry-run
    clipstream storage migrate
"""

import sys

import click

from clipstream.cli.utils import coro, error, info, section, success, warning
from clipstream.core.settings import get_storage_settings
from clipstream.infra.storage import LocalBackend, S3Backend, StorageError


@click.group(name="storage")
def storage() -> None:
    """Blob storage maintenance."""


@storage.command(name="info")
def info_cmd() -> None:
    """Show the storage configuration (credentials are never printed)."""
    settings = get_storage_settings()

    section("Storage Configuration")
    click.echo(f"Backend:        {settings.backend}")
    click.echo(f"Public URL:     {settings.public_base_url or '(default)'}")
    click.echo(f"Max file size:  {settings.max_file_size_mb} MB")
    click.echo(
        f"Buckets:        {settings.video_bucket}, {settings.thumbnail_bucket}, "
        f"{settings.avatar_bucket}"
    )
    click.echo(f"Video types:    {', '.join(settings.video_content_types)}")
    click.echo(f"Image types:    {', '.join(settings.image_content_types)}")

    if settings.backend == "local":
        click.echo(f"Local root:     {settings.local_root}")
        click.echo(f"Mounted at:     {settings.local_mount_path}")
        return

    click.echo(f"Endpoint:       {settings.endpoint or 'AWS S3 (default)'}")
    click.echo(f"Region:         {settings.region}")
    click.echo(f"Bucket prefix:  {settings.bucket_prefix or '(none)'}")
    click.echo(f"Use SSL:        {settings.use_ssl}")
    if settings.access_key and settings.secret_key:
        success("Credentials: configured")
    else:
        warning("Credentials: not configured (IAM role or environment)")


@storage.command()
@click.option("--dry-run", is_flag=True, help="Report missing files without deleting rows")
@coro
async def cleanup(dry_run: bool) -> None:
    """Delete video rows whose local video file is missing."""
    import clipstream.features.models  # noqa: F401
    from clipstream.features.videos.maintenance import cleanup_missing_videos
    from clipstream.infra.database import close_database, get_async_session

    settings = get_storage_settings()
    local = LocalBackend.from_settings(settings)
    info(f"Checking local files under {local.root}")

    try:
        async with get_async_session() as session:
            report = await cleanup_missing_videos(session, local, settings, dry_run=dry_run)
    finally:
        await close_database()

    click.echo(f"Checked: {report.checked}")
    click.echo(f"Missing: {report.missing}")
    if dry_run:
        if report.missing_ids:
            warning(f"Would delete videos: {', '.join(map(str, report.missing_ids))}")
        info("Dry run, nothing deleted")
    else:
        success(f"Deleted: {report.deleted}")


@storage.command()
@click.option("--dry-run", is_flag=True, help="Report what would move without uploading")
@coro
async def migrate(dry_run: bool) -> None:
    """Upload locally stored videos and thumbnails to S3 and repoint the rows."""
    import clipstream.features.models  # noqa: F401
    from clipstream.features.videos.maintenance import migrate_local_videos
    from clipstream.infra.database import close_database, get_async_session

    settings = get_storage_settings()
    local = LocalBackend.from_settings(settings)
    target = S3Backend(settings)

    try:
        await target.startup()
    except StorageError as e:
        error(f"S3 backend unavailable: {e.detail}")
        sys.exit(1)

    try:
        async with get_async_session() as session:
            report = await migrate_local_videos(
                session, local, target, settings, dry_run=dry_run
            )
    finally:
        await target.shutdown()
        await close_database()

    label = "Would migrate" if dry_run else "Migrated"
    success(f"{label}: {report.migrated}")
    click.echo(f"Skipped: {report.skipped}")
    if report.failed:
        error(f"Failed: {report.failed} ({', '.join(map(str, report.failed_ids))})")
        sys.exit(1)
