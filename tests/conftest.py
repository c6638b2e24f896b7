"""Pytest configuration and shared fixtures.

Organization:
    - Database Fixtures: per-test SQLite file, engine and sessions
    - Storage Fixtures: local blob store rooted in a temporary directory
    - Application Fixtures: FastAPI app with overridden dependencies, HTTP client
    - Data Fixtures: user/video factories and auth headers

Each test gets its own SQLite file so the fixture session and the sessions
opened by request handlers see the same committed data.
"""

from __future__ import annotations

import itertools
import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Ensure tests run without external infrastructure
os.environ.setdefault("DB_DSN", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("STORAGE_BACKEND", "local")
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret-key-with-enough-bytes-1234")
os.environ.setdefault("LOG_FILE_ENABLED", "false")

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine

    from clipstream.features.users.models import User
    from clipstream.features.videos.models import Video
    from clipstream.infra.storage import StorageService


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine]:
    """Async engine on a fresh SQLite file with every table created.

    Foreign keys are enforced so ``ON DELETE CASCADE`` behaves as in production.
    """
    from clipstream.core.database import Base
    from clipstream.infra.database import create_tables, enable_sqlite_foreign_keys

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    enable_sqlite_foreign_keys(engine)
    await create_tables(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory configured like the application's."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession]:
    """Session for arranging and inspecting test data."""
    async with session_factory() as session:
        yield session


# ============================================================================
# Storage Fixtures
# ============================================================================


@pytest.fixture
def uploads_root(tmp_path):
    """Directory the local blob store writes into."""
    return tmp_path / "uploads"


@pytest.fixture
def storage(uploads_root) -> StorageService:
    """Storage service on the local backend, rooted in ``tmp_path``."""
    from clipstream.core.settings import StorageSettings
    from clipstream.infra.storage import StorageService
    from clipstream.infra.storage.backends import LocalBackend

    settings = StorageSettings(backend="local", local_root=str(uploads_root))
    return StorageService(settings=settings, backend=LocalBackend(uploads_root, "/uploads"))


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(session_factory, storage) -> FastAPI:
    """FastAPI application wired to the test database and storage.

    ``ASGITransport`` does not run the lifespan, so no global engine or
    storage startup happens.
    """
    from clipstream.app.main import create_app
    from clipstream.core.dependencies import get_db_session, get_storage

    application = create_app()

    async def override_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db_session] = override_session
    application.dependency_overrides[get_storage] = lambda: storage
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """HTTPX client talking to the app in-process."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
def make_user(db_session) -> Callable[..., Awaitable[User]]:
    """Factory persisting users with a known password (``secret123``)."""
    from clipstream.features.users.models import User
    from clipstream.infra.auth import hash_password

    counter = itertools.count(1)

    async def _make(username: str | None = None, password: str = "secret123", **fields: Any) -> User:
        username = username or f"user{next(counter)}"
        fields.setdefault("email", f"{username}@example.com")
        user = User(username=username, password_hash=hash_password(password), **fields)
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


@pytest.fixture
def make_video(db_session) -> Callable[..., Awaitable[Video]]:
    """Factory persisting video rows without touching storage."""
    from clipstream.features.videos.models import Video

    counter = itertools.count(1)

    async def _make(owner: User, **fields: Any) -> Video:
        n = next(counter)
        path = f"user-{owner.id}/clip-{n}.mp4"
        fields.setdefault("video_url", f"/uploads/videos/{path}")
        fields.setdefault("video_storage_path", path)
        fields.setdefault("caption", f"clip {n}")
        video = Video(user_id=owner.id, **fields)
        db_session.add(video)
        await db_session.commit()
        return video

    return _make


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Bearer headers for a user."""
    from clipstream.infra.auth import create_access_token

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest.fixture
def upload_files() -> Callable[..., dict[str, tuple[str, bytes, str]]]:
    """Multipart ``files=`` payload for a video upload."""

    def _files(
        video: bytes = b"fake-mp4-bytes",
        content_type: str = "video/mp4",
        thumbnail: bytes | None = None,
    ) -> dict[str, tuple[str, bytes, str]]:
        files = {"video": ("clip.mp4", video, content_type)}
        if thumbnail is not None:
            files["thumbnail"] = ("thumb.png", thumbnail, "image/png")
        return files

    return _files
