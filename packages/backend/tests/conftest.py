"""Test fixtures — an in-memory database and a recording image host.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets a fresh in-memory SQLite database (aiosqlite +
   StaticPool, so every session shares the one connection).
2. get_db is overridden so each request opens its own session on that
   database, just like production. ``db_session`` is a separate session
   for asserting on what was stored.
3. get_image_storage is overridden with FakeImageStorage, which records
   uploads and destroys instead of calling Cloudinary.

Clients are real cookie-carrying httpx clients: log in once and the
accessToken/refreshToken cookies ride along on every later request.
"""

import os

os.environ.setdefault("WARDROBE_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("WARDROBE_ENVIRONMENT", "development")

import uuid

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from wardrobe.core.exceptions import ImageServiceError
from wardrobe.db.engine import get_db
from wardrobe.db.models import Base
from wardrobe.images.storage import UploadedImage, get_image_storage
from wardrobe.main import app

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"
PASSWORD = "correct horse battery"


class FakeImageStorage:
    """Stands in for Cloudinary. Set ``fail_upload`` to simulate an outage."""

    def __init__(self):
        self.uploads: list[tuple[str | None, int]] = []
        self.destroyed: list[str] = []
        self.fail_upload = False

    async def upload(self, data: bytes, filename: str | None = None) -> UploadedImage:
        if self.fail_upload:
            raise ImageServiceError()
        self.uploads.append((filename, len(data)))
        n = len(self.uploads)
        return UploadedImage(
            url=f"https://images.example.com/wardrobe/img-{n}.png",
            asset_id=f"wardrobe/img-{n}",
        )

    async def destroy(self, asset_id: str) -> None:
        self.destroyed.append(asset_id)


@pytest_asyncio.fixture()
async def db_engine():
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """A session for inspecting stored state directly."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def images():
    return FakeImageStorage()


@pytest_asyncio.fixture()
async def make_client(session_factory, images):
    """Factory for independent clients (each with its own cookie jar)."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_storage] = lambda: images

    clients: list[AsyncClient] = []

    def _make() -> AsyncClient:
        c = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(c)
        return c

    yield _make

    for c in clients:
        await c.aclose()
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(make_client):
    """Anonymous client (no cookies yet)."""
    return make_client()


async def register(client: AsyncClient, email: str | None = None, password: str = PASSWORD):
    email = email or f"user-{uuid.uuid4().hex[:8]}@example.com"
    r = await client.post(
        "/api/auth/register",
        json={"name": "Test User", "email": email, "password": password},
    )
    assert r.status_code == 201, r.text
    return email, r.json()["userId"]


async def login(client: AsyncClient, email: str, password: str = PASSWORD):
    r = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r


@pytest_asyncio.fixture()
async def user_client(make_client):
    """A client logged in as a freshly registered user."""
    c = make_client()
    email, user_id = await register(c)
    await login(c, email)
    c.user_id = user_id
    c.email = email
    return c


@pytest_asyncio.fixture()
async def other_client(make_client):
    """A second, unrelated logged-in user."""
    c = make_client()
    email, user_id = await register(c)
    await login(c, email)
    c.user_id = user_id
    c.email = email
    return c
