"""Object naming and content-type helpers.

Example:
    name = generate_unique_file_name("holiday clip.MP4")
    # "1735689600000-9f86d081884c7d65.mp4"
    path = user_object_path(42, name)
    # "user-42/1735689600000-9f86d081884c7d65.mp4"
"""

from __future__ import annotations

import re
import secrets
import time
from pathlib import PurePosixPath

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".mov": "video/quicktime",
}

_EXTENSION_RE = re.compile(r"^\.[a-z0-9]{1,10}$")


def file_extension(filename: str | None) -> str:
    """Lower-cased extension including the dot, or "" when absent or odd."""
    if not filename:
        return ""
    suffix = PurePosixPath(filename.replace("\\", "/")).suffix.lower()
    return suffix if _EXTENSION_RE.match(suffix) else ""


def generate_unique_file_name(original_name: str | None) -> str:
    """``{epoch_millis}-{16 hex chars}{ext}``, keeping the original extension."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(8)}{file_extension(original_name)}"


def user_object_path(user_id: int, file_name: str) -> str:
    """Object path inside a bucket, grouped per owner."""
    return f"user-{user_id}/{file_name}"


def guess_mime_type(path: str) -> str:
    return MIME_TYPES.get(file_extension(path), DEFAULT_MIME_TYPE)


def validate_object_path(path: str) -> str:
    """Reject absolute paths and traversal segments.

    Raises:
        ValueError: If the path could escape its bucket.
    """
    if not path or path.startswith("/") or "\\" in path:
        msg = f"Invalid object path: {path!r}"
        raise ValueError(msg)
    if any(part in {"", ".", ".."} for part in path.split("/")):
        msg = f"Invalid object path: {path!r}"
        raise ValueError(msg)
    return path


__all__ = [
    "DEFAULT_MIME_TYPE",
    "MIME_TYPES",
    "file_extension",
    "generate_unique_file_name",
    "guess_mime_type",
    "user_object_path",
    "validate_object_path",
]
